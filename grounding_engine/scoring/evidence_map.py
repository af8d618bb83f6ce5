"""Evidence map: draft-level view of which documents back which paragraphs."""

import logging
from typing import Optional

from grounding_engine.scoring.grounding import GroundingScorer
from grounding_engine.scoring.models import (
    EvidenceMap,
    GroundingAnalysis,
    ParagraphCitations,
    Severity,
    SourceDistribution,
    UnsupportedClaim,
    ValidationIssue,
)

logger = logging.getLogger(__name__)

_EXCERPT_LENGTH = 100


# ── Paragraph Findings ───────────────────────────────────────────────


def _severity(quality: float, scorer: GroundingScorer) -> Severity:
    if quality < scorer.config.severe_grounding_cutoff:
        return "high"
    if quality < scorer.config.minimum_grounding_quality:
        return "medium"
    return "low"


def paragraph_findings(
    paragraph: ParagraphCitations, scorer: GroundingScorer
) -> list[ValidationIssue]:
    """Issues raised by a paragraph's grounding quality alone."""
    quality = paragraph.grounding_quality
    findings = []

    if quality < scorer.config.minimum_grounding_quality:
        findings.append(ValidationIssue(
            type="weak_citation",
            severity="high" if quality < scorer.config.severe_grounding_cutoff else "medium",
            description=f"Low grounding quality: {round(quality * 100)}%",
            suggestion="Consider adding stronger evidence or rephrasing claims",
        ))

    if quality < scorer.config.severe_grounding_cutoff:
        findings.append(ValidationIssue(
            type="potential_hallucination",
            severity="high",
            description="This paragraph may contain unsupported claims",
            suggestion="Review all claims and ensure they are backed by your uploaded documents",
        ))

    return findings


def recommendations_for(quality: float, severity: Severity, scorer: GroundingScorer) -> list[str]:
    recs = []
    if quality < scorer.config.severe_grounding_cutoff:
        recs.append("This paragraph needs significant strengthening with evidence from your documents")
        recs.append("Consider breaking complex claims into separate, well-supported statements")
    elif quality < scorer.config.minimum_grounding_quality:
        recs.append("Add more specific evidence to support the claims in this paragraph")
        recs.append("Review source documents for more relevant supporting information")

    if severity == "high":
        recs.append("High priority: Review and revise this content before submission")
    return recs


def identify_unsupported_paragraphs(
    paragraphs: list[ParagraphCitations],
    scorer: GroundingScorer,
    threshold: Optional[float] = None,
) -> list[GroundingAnalysis]:
    """Paragraphs below the grounding threshold, in draft order."""
    if threshold is None:
        threshold = scorer.config.minimum_grounding_quality

    analyses = []
    for p in sorted(paragraphs, key=lambda p: p.order):
        if p.grounding_quality >= threshold:
            continue
        severity = _severity(p.grounding_quality, scorer)
        analyses.append(GroundingAnalysis(
            paragraph_id=p.paragraph_id,
            paragraph_text=p.paragraph_text,
            grounding_quality=p.grounding_quality,
            issue_severity=severity,
            recommendations=recommendations_for(p.grounding_quality, severity, scorer),
        ))
    return analyses


# ── Evidence Map ─────────────────────────────────────────────────────


def source_distribution(
    paragraphs: list[ParagraphCitations],
    document_names: Optional[dict[str, str]] = None,
) -> list[SourceDistribution]:
    """Citation count, mean similarity and paragraph reach per document."""
    document_names = document_names or {}
    total = len(paragraphs)

    similarities: dict[str, list[float]] = {}
    reach: dict[str, set[str]] = {}
    for p in paragraphs:
        for src in p.sources:
            similarities.setdefault(src.document_id, []).append(src.similarity_score)
            reach.setdefault(src.document_id, set()).add(p.paragraph_id)

    rows = []
    for doc_id, sims in similarities.items():
        rows.append(SourceDistribution(
            document_id=doc_id,
            document_name=document_names.get(doc_id, doc_id),
            citation_count=len(sims),
            average_similarity=sum(sims) / len(sims),
            coverage_percentage=len(reach[doc_id]) / total * 100 if total else 0.0,
        ))
    rows.sort(key=lambda r: (-r.citation_count, r.document_id))
    return rows


def build_evidence_map(
    paragraphs: list[ParagraphCitations],
    scorer: GroundingScorer,
    section_name: str = "Generated Response",
    document_names: Optional[dict[str, str]] = None,
) -> EvidenceMap:
    """Summarise how strongly a draft section is backed by its sources."""
    total = len(paragraphs)
    qualities = [p.grounding_quality for p in paragraphs]
    cited = sum(1 for p in paragraphs if p.sources)

    evidence_strength = min(1.0, sum(qualities) / total) if total else 0.0
    source_coverage = cited / total * 100 if total else 0.0

    unsupported = []
    for p in sorted(paragraphs, key=lambda p: p.order):
        if p.grounding_quality >= scorer.config.minimum_grounding_quality:
            continue
        excerpt = p.paragraph_text
        if len(excerpt) > _EXCERPT_LENGTH:
            excerpt = excerpt[:_EXCERPT_LENGTH] + "..."
        unsupported.append(UnsupportedClaim(
            text=excerpt,
            start=0,
            end=len(p.paragraph_text),
            severity=_severity(p.grounding_quality, scorer),
            reason=f"Low grounding quality: {round(p.grounding_quality * 100)}%",
        ))

    evidence_map = EvidenceMap(
        section_name=section_name,
        evidence_strength=evidence_strength,
        source_coverage=source_coverage,
        hallucination_risk=scorer.classify_risk(qualities),
        unsupported_claims=unsupported,
        source_distribution=source_distribution(paragraphs, document_names),
    )
    logger.info(
        "Evidence map '%s': strength %.2f, coverage %.0f%%, %d unsupported paragraphs",
        section_name, evidence_strength, source_coverage, len(unsupported),
    )
    return evidence_map
