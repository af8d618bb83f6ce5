"""Scoring configuration: Pydantic models, YAML loader, and calibration hashing."""

import hashlib
import json
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator


# ── Scoring Cutoffs ──────────────────────────────────────────────────


class ScoringConfig(BaseModel):
    """Every policy cutoff used by the extractors, matcher and scorer.

    The defaults are heuristic and uncalibrated; override them from YAML when
    tuning against labeled drafts.
    """

    # Text decomposition
    min_paragraph_length: int = Field(
        default=50, ge=0, description="Paragraphs no longer than this are skipped"
    )
    min_claim_length: int = Field(
        default=10, ge=0, description="Sentence fragments shorter than this are dropped"
    )

    # Grounding
    proximity_window: int = Field(
        default=100, ge=0, description="Chars around a claim within which a citation counts"
    )
    low_grounding_cutoff: float = Field(default=0.5, ge=0.0, le=1.0)
    high_risk_fraction: float = Field(default=0.30, ge=0.0, le=1.0)
    medium_risk_fraction: float = Field(default=0.15, ge=0.0, le=1.0)

    # Document-level issues
    minimum_overall_score: float = Field(default=0.6, ge=0.0, le=1.0)
    minimum_citation_coverage: float = Field(
        default=70.0, ge=0.0, le=100.0, description="Percentage of cited paragraphs"
    )

    # Source matching
    minimum_similarity: float = Field(
        default=0.6, ge=0.0, le=1.0, description="Bar for accepting a claim-source citation"
    )
    suggestion_threshold: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Bar for listing a source as a suggestion"
    )
    citation_validation_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    citation_validation_slack: float = Field(default=0.1, ge=0.0, le=1.0)
    minimum_grounding_quality: float = Field(default=0.6, ge=0.0, le=1.0)
    severe_grounding_cutoff: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Below this a paragraph may be hallucinated"
    )

    # Citation strength bands
    strong_citation_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    moderate_citation_threshold: float = Field(default=0.6, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def ordered_bands(self) -> "ScoringConfig":
        if self.medium_risk_fraction > self.high_risk_fraction:
            raise ValueError(
                f"medium_risk_fraction ({self.medium_risk_fraction}) must be "
                f"<= high_risk_fraction ({self.high_risk_fraction})"
            )
        if self.moderate_citation_threshold > self.strong_citation_threshold:
            raise ValueError(
                "moderate_citation_threshold must be <= strong_citation_threshold"
            )
        if self.citation_validation_slack > self.citation_validation_threshold:
            raise ValueError(
                "citation_validation_slack cannot exceed citation_validation_threshold"
            )
        return self

    @property
    def citation_match_threshold(self) -> float:
        """Similarity an existing citation must exceed to count as valid."""
        return self.citation_validation_threshold - self.citation_validation_slack

    def config_hash(self) -> str:
        """SHA-256 of the cutoffs (canonical JSON), for recording calibration."""
        return _canonical_hash(self.model_dump())


# ── Harness Thresholds ───────────────────────────────────────────────


class QualityThresholds(BaseModel):
    """Suite-wide pass bars for the quality test harness."""

    minimum_grounding_score: float = Field(default=0.85, ge=0.0, le=1.0)
    minimum_citation_accuracy: float = Field(default=0.90, ge=0.0, le=1.0)
    maximum_hallucination_rate: float = Field(default=0.10, ge=0.0, le=1.0)
    minimum_coverage: float = Field(default=0.80, ge=0.0, le=1.0)
    minimum_consistency_score: float = Field(default=0.85, ge=0.0, le=1.0)


# ── Helpers ──────────────────────────────────────────────────────────


def _canonical_hash(data: dict) -> str:
    """Deterministic SHA-256 hash of a dict via sorted-key JSON."""
    blob = json.dumps(data, sort_keys=True, default=str).encode()
    return hashlib.sha256(blob).hexdigest()


def read_yaml(path: str | Path) -> dict:
    """Read a YAML mapping from disk (an empty file reads as {})."""
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)
    return raw or {}


def load_scoring_config(path: str | Path) -> ScoringConfig:
    """Load a YAML scoring config from disk and return a validated model."""
    return ScoringConfig.model_validate(read_yaml(path))
