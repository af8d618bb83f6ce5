"""Shared data models for the quality test harness."""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from grounding_engine.core.config import QualityThresholds
from grounding_engine.scoring.models import CitationSource, RiskLevel, ValidationIssue
from grounding_engine.sources.models import CandidateSource

TestType = Literal["grounding", "accuracy", "hallucination", "coverage", "consistency"]


class TestCase(BaseModel):
    """One declarative quality check: a text, a pool and what to measure."""

    __test__ = False

    id: str
    name: str
    description: str = ""
    type: TestType
    input_text: str
    available_context: list[CandidateSource] = Field(default_factory=list)
    expected_sources: list[str] = Field(default_factory=list)
    expected_citations: Optional[int] = Field(default=None, ge=0)
    expected_score: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, description="Overrides the suite threshold"
    )

    @field_validator("id", "name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class TestSuite(BaseModel):
    """A named list of test cases and the thresholds they are judged by.

    Entries that do not validate as a TestCase are kept as raw dicts so the
    runner can report them as failed tests instead of rejecting the suite.
    """

    __test__ = False

    name: str
    thresholds: QualityThresholds = Field(default_factory=QualityThresholds)
    tests: list[
        Annotated[Union[TestCase, Any], Field(union_mode="left_to_right")]
    ] = Field(default_factory=list)


# ── Results ──────────────────────────────────────────────────────────


class TestDetails(BaseModel):
    """Type-specific measurements; only the field for the case's type is set."""

    __test__ = False

    grounding_quality: Optional[float] = None
    citation_accuracy: Optional[float] = None
    hallucination_rate: Optional[float] = None
    hallucination_risk: Optional[RiskLevel] = None
    coverage_score: Optional[float] = None
    consistency_score: Optional[float] = None


class TestResult(BaseModel):
    __test__ = False

    test_id: str
    test_name: str
    passed: bool
    score: float = Field(ge=0.0, le=1.0)
    expected_score: Optional[float] = None
    actual_citations: list[CitationSource] = Field(default_factory=list)
    issues: list[ValidationIssue] = Field(default_factory=list)
    execution_time: float = Field(default=0.0, description="Seconds")
    details: TestDetails = Field(default_factory=TestDetails)


class SuiteSummary(BaseModel):
    """Per-type averages; None when the suite has no test of that type."""

    grounding_quality: Optional[float] = None
    citation_accuracy: Optional[float] = None
    hallucination_rate: Optional[float] = None
    coverage: Optional[float] = None
    consistency: Optional[float] = None


class SuiteResult(BaseModel):
    suite_name: str
    total_tests: int
    passed_tests: int
    overall_score: float
    execution_time: float
    thresholds_met: bool
    test_results: list[TestResult]
    summary: SuiteSummary
    recommendations: list[str]
