"""Tests for scoring configuration loading and calibration hashing."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from grounding_engine.core.config import (
    QualityThresholds,
    ScoringConfig,
    load_scoring_config,
)

DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "quality_suites" / "scoring_defaults.yaml"


# ── Loading & Validation ─────────────────────────────────────────────


def test_bundled_defaults_match_model_defaults():
    config = load_scoring_config(DEFAULTS_PATH)
    assert config == ScoringConfig()


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_scoring_config(path) == ScoringConfig()


def test_partial_override(tmp_path):
    path = tmp_path / "strict.yaml"
    path.write_text(yaml.dump({"minimum_similarity": 0.75, "proximity_window": 40}))
    config = load_scoring_config(path)
    assert config.minimum_similarity == 0.75
    assert config.proximity_window == 40
    assert config.min_paragraph_length == 50


def test_out_of_range_rejected():
    with pytest.raises(ValidationError):
        ScoringConfig(minimum_similarity=1.5)


def test_risk_fractions_must_be_ordered():
    with pytest.raises(ValidationError):
        ScoringConfig(high_risk_fraction=0.1, medium_risk_fraction=0.2)


def test_strength_bands_must_be_ordered():
    with pytest.raises(ValidationError):
        ScoringConfig(strong_citation_threshold=0.5, moderate_citation_threshold=0.7)


def test_citation_match_threshold_applies_slack():
    config = ScoringConfig()
    assert config.citation_match_threshold == pytest.approx(0.5)


def test_quality_threshold_defaults():
    t = QualityThresholds()
    assert t.minimum_grounding_score == 0.85
    assert t.minimum_citation_accuracy == 0.90
    assert t.maximum_hallucination_rate == 0.10
    assert t.minimum_coverage == 0.80
    assert t.minimum_consistency_score == 0.85


# ── Calibration Hashing ──────────────────────────────────────────────


def test_hash_deterministic():
    assert ScoringConfig().config_hash() == load_scoring_config(DEFAULTS_PATH).config_hash()


def test_hash_changes_on_modification():
    original = ScoringConfig().config_hash()
    modified = ScoringConfig(proximity_window=50)
    assert modified.config_hash() != original
    assert len(original) == 64
