"""Tests for sentence splitting and claim classification."""

import pytest

from grounding_engine.parsing.claims import ClaimExtractor, split_sentences


@pytest.fixture()
def extractor():
    return ClaimExtractor()


def _only(extractor, text):
    claims = extractor.extract_claims(text)
    assert len(claims) == 1
    return claims[0]


# ── Sentence Splitting ───────────────────────────────────────────────


def test_decimal_points_do_not_split():
    sentences = split_sentences("Rates rose 13.5% last year. Then they fell sharply!")
    assert [s for _, _, s in sentences] == ["Rates rose 13.5% last year", "Then they fell sharply"]


def test_offsets_index_into_text():
    text = "  First sentence here.   Second one follows?"
    for start, end, sentence in split_sentences(text):
        assert text[start:end] == sentence


def test_short_fragments_dropped():
    sentences = split_sentences("Yes. Our program serves rural families well.", min_length=10)
    assert [s for _, _, s in sentences] == ["Our program serves rural families well"]


def test_empty_text(extractor):
    assert split_sentences("") == []
    assert extractor.extract_claims("") == []


# ── Classification ───────────────────────────────────────────────────


def test_statistical_claim(extractor):
    claim = _only(extractor, "Our org served 5,000 people in 2023.")
    assert claim.type == "statistical"
    assert claim.needs_citation
    assert claim.confidence == 0.9


def test_currency_is_statistical(extractor):
    claim = _only(extractor, "The city invested $40,000 in the new shelter.")
    assert claim.type == "statistical"


def test_authority_claim(extractor):
    claim = _only(extractor, "Research shows that mentoring improves attendance.")
    assert claim.type == "factual"
    assert claim.needs_citation
    assert claim.confidence == 0.8


def test_opinion_never_needs_citation(extractor):
    claim = _only(extractor, "We believe every child deserves a safe home.")
    assert claim.type == "opinion"
    assert not claim.needs_citation
    assert claim.confidence == 0.4


def test_plain_methodological(extractor):
    claim = _only(extractor, "Our approach builds trust with local families.")
    assert claim.type == "methodological"
    assert not claim.needs_citation
    assert claim.confidence == 0.6


def test_methodological_with_proven_outcome(extractor):
    claim = _only(extractor, "Our proven approach reduces dropout among teens.")
    assert claim.type == "methodological"
    assert claim.needs_citation


def test_statistical_outranks_methodological(extractor):
    claim = _only(extractor, "Our approach reached 40% of eligible households.")
    assert claim.type == "statistical"


def test_default_factual_without_indicator(extractor):
    claim = _only(extractor, "The program operates in three neighborhoods.")
    assert claim.type == "factual"
    assert not claim.needs_citation
    assert claim.confidence == 0.7


# ── Offsets ──────────────────────────────────────────────────────────


def test_base_offset_shifts_positions(extractor):
    text = "Intro words here. We served 300 families in 2022."
    plain = extractor.extract_claims(text)
    shifted = extractor.extract_claims(text, base_offset=100)
    assert [c.start + 100 for c in plain] == [c.start for c in shifted]
    assert text[plain[1].start:plain[1].end] == plain[1].text


def test_deterministic(extractor):
    text = "Studies indicate that 70% of participants improved. We feel hopeful."
    assert extractor.extract_claims(text) == extractor.extract_claims(text)
