"""Tests for the evidence map and unsupported-paragraph analysis."""

import pytest

from grounding_engine.scoring.evidence_map import (
    build_evidence_map,
    identify_unsupported_paragraphs,
    paragraph_findings,
)
from grounding_engine.scoring.grounding import GroundingScorer
from grounding_engine.scoring.models import CitationSource, ParagraphCitations


@pytest.fixture()
def scorer():
    return GroundingScorer()


# ── Factories ────────────────────────────────────────────────────────


def _source(document_id, similarity, paragraph_id="para-0", n=0):
    return CitationSource(
        id=f"{paragraph_id}-src-{n}",
        paragraph_id=paragraph_id,
        chunk_id=f"{document_id}-chunk",
        document_id=document_id,
        text_match="claim",
        source_text="passage",
        similarity_score=similarity,
        strength="moderate",
        position_in_paragraph=0,
    )


def _paragraph(order, quality, sources=(), text=None):
    pid = f"para-{order}"
    return ParagraphCitations(
        paragraph_id=pid,
        paragraph_text=text or f"Paragraph {order} text.",
        order=order,
        grounding_quality=quality,
        sources=list(sources),
    )


@pytest.fixture()
def paragraphs():
    return [
        _paragraph(0, 1.0, [_source("annual", 0.8), _source("annual", 0.6, n=1)]),
        _paragraph(1, 0.5, [_source("budget", 0.7, paragraph_id="para-1")]),
        _paragraph(2, 0.2),
    ]


# ── Evidence Map ─────────────────────────────────────────────────────


def test_empty_map(scorer):
    evidence = build_evidence_map([], scorer)
    assert evidence.evidence_strength == 0.0
    assert evidence.source_coverage == 0.0
    assert evidence.hallucination_risk == "low"
    assert evidence.section_name == "Generated Response"


def test_strength_and_coverage(scorer, paragraphs):
    evidence = build_evidence_map(paragraphs, scorer, section_name="Need Statement")
    assert evidence.section_name == "Need Statement"
    assert evidence.evidence_strength == pytest.approx(1.7 / 3)
    assert evidence.source_coverage == pytest.approx(200 / 3)
    assert evidence.hallucination_risk == "high"


def test_unsupported_claims_flagged(scorer, paragraphs):
    evidence = build_evidence_map(paragraphs, scorer)
    assert [u.severity for u in evidence.unsupported_claims] == ["medium", "high"]
    assert evidence.unsupported_claims[1].reason == "Low grounding quality: 20%"


def test_long_paragraph_excerpted(scorer):
    evidence = build_evidence_map([_paragraph(0, 0.1, text="word " * 60)], scorer)
    excerpt = evidence.unsupported_claims[0].text
    assert excerpt.endswith("...")
    assert len(excerpt) == 103


def test_source_distribution(scorer, paragraphs):
    rows = build_evidence_map(paragraphs, scorer, document_names={"annual": "Annual Report"}).source_distribution
    assert [r.document_id for r in rows] == ["annual", "budget"]
    assert rows[0].document_name == "Annual Report"
    assert rows[0].citation_count == 2
    assert rows[0].average_similarity == pytest.approx(0.7)
    assert rows[0].coverage_percentage == pytest.approx(100 / 3)
    assert rows[1].document_name == "budget"


# ── Unsupported Paragraphs ───────────────────────────────────────────


def test_identify_unsupported_paragraphs(scorer, paragraphs):
    analyses = identify_unsupported_paragraphs(paragraphs, scorer)
    assert [a.paragraph_id for a in analyses] == ["para-1", "para-2"]
    assert analyses[0].issue_severity == "medium"
    assert analyses[0].recommendations == [
        "Add more specific evidence to support the claims in this paragraph",
        "Review source documents for more relevant supporting information",
    ]
    assert analyses[1].issue_severity == "high"
    assert analyses[1].recommendations[-1] == (
        "High priority: Review and revise this content before submission"
    )
    assert len(analyses[1].recommendations) == 3


def test_custom_threshold(scorer, paragraphs):
    analyses = identify_unsupported_paragraphs(paragraphs, scorer, threshold=0.4)
    assert [a.paragraph_id for a in analyses] == ["para-2"]


# ── Paragraph Findings ───────────────────────────────────────────────


def test_findings_for_severely_weak_paragraph(scorer):
    findings = paragraph_findings(_paragraph(0, 0.2), scorer)
    assert [f.type for f in findings] == ["weak_citation", "potential_hallucination"]
    assert all(f.severity == "high" for f in findings)


def test_findings_for_moderately_weak_paragraph(scorer):
    findings = paragraph_findings(_paragraph(0, 0.5), scorer)
    assert [(f.type, f.severity) for f in findings] == [("weak_citation", "medium")]


def test_no_findings_for_grounded_paragraph(scorer):
    assert paragraph_findings(_paragraph(0, 0.9), scorer) == []
