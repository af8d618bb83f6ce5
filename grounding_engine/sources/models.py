"""Shared data models for candidate source passages."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceMetadata(BaseModel):
    """Location of a passage inside its owning document."""

    page_number: Optional[int] = None
    section_title: Optional[str] = None
    chunk_index: Optional[int] = None


class CandidateSource(BaseModel):
    """A single retrievable passage supplied by the retrieval layer."""

    model_config = ConfigDict(frozen=True)

    chunk_id: str
    document_id: str
    content: str
    similarity: Optional[float] = Field(
        default=None, description="Retriever score vs. the question; tiebreaker only"
    )
    metadata: SourceMetadata = Field(default_factory=SourceMetadata)


class ScoredSource(BaseModel):
    """A candidate paired with its similarity to one claim or citation."""

    source: CandidateSource
    similarity: float = Field(ge=0.0, le=1.0)
