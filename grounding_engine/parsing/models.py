"""Shared data models for claim and citation extraction."""

from typing import Literal

from pydantic import BaseModel, Field

ClaimType = Literal["factual", "statistical", "methodological", "opinion"]
CitationKind = Literal["inline", "implicit", "numerical"]


class Claim(BaseModel):
    """A sentence-level assertion that may need evidentiary support."""

    text: str
    type: ClaimType
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    confidence: float = Field(ge=0.0, le=1.0)
    needs_citation: bool


class CitationCheck(BaseModel):
    """Validation state carried on an extracted citation."""

    is_valid: bool = True
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    issues: list[str] = Field(default_factory=list)


class ExtractedCitation(BaseModel):
    """A citation marker found in draft text."""

    id: str
    paragraph_id: str
    claim_text: str
    source_reference: str
    kind: CitationKind
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    validation: CitationCheck = Field(default_factory=CitationCheck)
