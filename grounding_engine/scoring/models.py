"""Shared data models for grounding assessment and citation validation."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from grounding_engine.parsing.models import Claim, ExtractedCitation
from grounding_engine.sources.models import CandidateSource

Severity = Literal["low", "medium", "high"]
RiskLevel = Literal["low", "medium", "high"]
IssueType = Literal[
    "unsupported_claim", "weak_citation", "potential_hallucination", "missing_source"
]
CitationMethod = Literal["semantic", "exact", "paraphrase"]
CitationStrength = Literal["strong", "moderate", "weak"]



class ValidationIssue(BaseModel):
    """A structured finding the caller may choose to block on."""

    type: IssueType
    severity: Severity
    description: str
    suggestion: Optional[str] = None
    start: Optional[int] = None
    end: Optional[int] = None


# ── Document Assessment ──────────────────────────────────────────────


class ParagraphAssessment(BaseModel):
    """One scored paragraph of a draft."""

    id: str
    order: int
    text: str
    claims: list[Claim]
    citation_count: int = Field(ge=0)
    grounding_score: float = Field(ge=0.0, le=1.0)


class DocumentAssessment(BaseModel):
    """Aggregate grounding verdict for a whole draft."""

    overall_score: float = Field(ge=0.0, le=1.0)
    citation_coverage: float = Field(ge=0.0, le=100.0)
    hallucination_risk: RiskLevel
    issues: list[ValidationIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class ParsedContent(BaseModel):
    """Result of parsing a draft against a candidate pool."""

    paragraphs: list[ParagraphAssessment]
    citations: list[ExtractedCitation]
    validation: DocumentAssessment


# ── Paragraph Citation Generation ────────────────────────────────────


class CitationSource(BaseModel):
    """A claim matched to a supporting passage."""

    id: str
    paragraph_id: str
    chunk_id: str
    document_id: str
    text_match: str
    source_text: str
    similarity_score: float = Field(ge=0.0, le=1.0)
    strength: CitationStrength
    position_in_paragraph: int = Field(ge=0)
    method: CitationMethod = "semantic"
    page_number: Optional[int] = None
    section_title: Optional[str] = None


class CitationValidation(BaseModel):
    """Verdict on one citation (or one claim that should carry one)."""

    citation_id: str
    is_valid: bool
    score: float = Field(ge=0.0, le=1.0)
    issues: list[ValidationIssue] = Field(default_factory=list)


class CitationSuggestion(BaseModel):
    """An edit the author could make to improve grounding."""

    type: Literal["add_citation", "strengthen_citation", "remove_claim", "rephrase"]
    description: str
    start: int = 0
    end: int = 0
    source_recommendation: Optional[CandidateSource] = None


class CitationRequest(BaseModel):
    """Input for citing a single paragraph against a candidate pool."""

    text: str
    context: list[CandidateSource] = Field(default_factory=list)
    paragraph_id: str
    position: int = 0
    citation_method: CitationMethod = "semantic"
    minimum_similarity: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class CitationResponse(BaseModel):
    """Citations, grounding quality and findings for one paragraph."""

    citations: list[CitationSource] = Field(default_factory=list)
    grounding_quality: float = Field(ge=0.0, le=1.0)
    validation_issues: list[ValidationIssue] = Field(default_factory=list)
    validations: list[CitationValidation] = Field(default_factory=list)
    suggestions: list[CitationSuggestion] = Field(default_factory=list)


class ClaimSourceSuggestion(BaseModel):
    """Passages that could support an uncited claim."""

    claim: Claim
    suggested_sources: list[CandidateSource]
    confidence: float = Field(ge=0.0, le=1.0)


# ── Evidence Map ─────────────────────────────────────────────────────


class ParagraphCitations(BaseModel):
    """A paragraph together with the citations generated for it."""

    paragraph_id: str
    paragraph_text: str
    order: int = 0
    grounding_quality: float = Field(ge=0.0, le=1.0)
    validation_issues: list[ValidationIssue] = Field(default_factory=list)
    sources: list[CitationSource] = Field(default_factory=list)


class UnsupportedClaim(BaseModel):
    text: str
    start: int
    end: int
    severity: Severity
    reason: str


class SourceDistribution(BaseModel):
    """How heavily one document is relied upon across a draft."""

    document_id: str
    document_name: str
    citation_count: int
    average_similarity: float
    coverage_percentage: float


class GroundingAnalysis(BaseModel):
    """A weakly grounded paragraph with remediation advice."""

    paragraph_id: str
    paragraph_text: str
    grounding_quality: float
    issue_severity: Severity
    recommendations: list[str]


class EvidenceMap(BaseModel):
    """Section-level summary of how well a draft is backed by its sources."""

    section_name: str
    evidence_strength: float = Field(ge=0.0, le=1.0)
    source_coverage: float = Field(ge=0.0, le=100.0)
    hallucination_risk: RiskLevel
    unsupported_claims: list[UnsupportedClaim] = Field(default_factory=list)
    source_distribution: list[SourceDistribution] = Field(default_factory=list)
