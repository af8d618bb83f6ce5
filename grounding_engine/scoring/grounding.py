"""Grounding scorer: per-paragraph and per-document evidence checks."""

import logging
import re
from typing import Optional

from grounding_engine.core.config import ScoringConfig
from grounding_engine.parsing.citations import CitationExtractor
from grounding_engine.parsing.claims import ClaimExtractor
from grounding_engine.parsing.models import CitationCheck, Claim, ExtractedCitation
from grounding_engine.scoring.models import (
    CitationRequest,
    CitationResponse,
    CitationSource,
    CitationStrength,
    CitationSuggestion,
    CitationValidation,
    ClaimSourceSuggestion,
    DocumentAssessment,
    ParagraphAssessment,
    ParsedContent,
    RiskLevel,
    ValidationIssue,
)
from grounding_engine.sources.matcher import SourceMatcher
from grounding_engine.sources.models import CandidateSource

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")

# Score recorded for a citation with no usable source
_UNSUPPORTED_SCORE = 0.3
_TOP_K_SOURCES = 3


# ── Paragraph Splitting ──────────────────────────────────────────────


def split_paragraphs(content: str, min_length: int = 0) -> list[tuple[int, str]]:
    """Split content on blank lines into (offset, trimmed paragraph) pairs.

    Paragraphs no longer than min_length characters are dropped.
    """
    paragraphs = []
    pos = 0
    breaks = [m.span() for m in _PARAGRAPH_BREAK_RE.finditer(content)]
    breaks.append((len(content), len(content)))
    for brk_start, brk_end in breaks:
        chunk = content[pos:brk_start]
        stripped = chunk.strip()
        if stripped and len(stripped) > min_length:
            offset = pos + (len(chunk) - len(chunk.lstrip()))
            paragraphs.append((offset, stripped))
        pos = brk_end
    return paragraphs


# ── Scorer ───────────────────────────────────────────────────────────


class GroundingScorer:
    """Combines claims, citations and source matches into grounding scores.

    Holds configuration only; every method is safe to call concurrently.
    """

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        matcher: Optional[SourceMatcher] = None,
        claim_extractor: Optional[ClaimExtractor] = None,
        citation_extractor: Optional[CitationExtractor] = None,
    ):
        self.config = config or ScoringConfig()
        self.matcher = matcher or SourceMatcher()
        self.claim_extractor = claim_extractor or ClaimExtractor(
            min_claim_length=self.config.min_claim_length
        )
        self.citation_extractor = citation_extractor or CitationExtractor()

    # ── Paragraph Scoring ────────────────────────────────────────

    def score_paragraph(
        self, claims: list[Claim], citations: list[ExtractedCitation]
    ) -> float:
        """Fraction of citation-needing claims with a citation nearby.

        No claim needing a citation means nothing can fail: score 1.0.
        """
        required = [c for c in claims if c.needs_citation]
        if not required:
            return 1.0

        window = self.config.proximity_window
        covered = [
            claim
            for claim in required
            if any(
                cit.start >= claim.start - window and cit.end <= claim.end + window
                for cit in citations
            )
        ]
        return len(covered) / len(required)

    # ── Document Aggregation ─────────────────────────────────────

    def classify_risk(self, scores: list[float]) -> RiskLevel:
        """Hallucination risk from the share of weakly grounded paragraphs."""
        if not scores:
            return "low"
        low = sum(1 for s in scores if s < self.config.low_grounding_cutoff)
        fraction = low / len(scores)
        if low and fraction >= self.config.high_risk_fraction:
            return "high"
        if low and fraction >= self.config.medium_risk_fraction:
            return "medium"
        return "low"

    def assess_document(self, paragraphs: list[ParagraphAssessment]) -> DocumentAssessment:
        """Aggregate paragraph scores into the document verdict."""
        total = len(paragraphs)
        scores = [p.grounding_score for p in paragraphs]

        if total:
            overall = min(1.0, sum(scores) / total)
            cited = sum(1 for p in paragraphs if p.citation_count > 0)
            coverage = min(100.0, cited / total * 100)
        else:
            # Nothing to ground
            overall, coverage = 1.0, 100.0

        issues: list[ValidationIssue] = []
        suggestions: list[str] = []

        if overall < self.config.minimum_overall_score:
            issues.append(ValidationIssue(
                type="weak_citation",
                severity="high",
                description=f"Overall grounding quality is {round(overall * 100)}%",
            ))
            suggestions.append("Strengthen evidence support throughout the document")

        if coverage < self.config.minimum_citation_coverage:
            issues.append(ValidationIssue(
                type="missing_source",
                severity="medium",
                description=f"Only {round(coverage)}% of paragraphs have citations",
            ))
            suggestions.append("Add citations to more paragraphs to improve credibility")

        return DocumentAssessment(
            overall_score=overall,
            citation_coverage=coverage,
            hallucination_risk=self.classify_risk(scores),
            issues=issues,
            suggestions=suggestions,
        )

    # ── Full Draft ───────────────────────────────────────────────

    def parse_content(self, content: str, pool: list[CandidateSource]) -> ParsedContent:
        """Decompose a draft, score each paragraph and validate its citations."""
        pool = pool or []
        paragraphs: list[ParagraphAssessment] = []
        all_citations: list[ExtractedCitation] = []

        for order, (offset, text) in enumerate(
            split_paragraphs(content or "", self.config.min_paragraph_length)
        ):
            paragraph_id = f"para-{order}"
            claims = self.claim_extractor.extract_claims(text, offset)
            citations = self.citation_extractor.extract_citations(text, paragraph_id, offset)
            score = self.score_paragraph(claims, citations)

            paragraphs.append(ParagraphAssessment(
                id=paragraph_id,
                order=order,
                text=text,
                claims=claims,
                citation_count=len(citations),
                grounding_score=score,
            ))
            all_citations.extend(citations)
            logger.debug(
                "Paragraph %s: %d claims, %d citations, grounding %.2f",
                paragraph_id, len(claims), len(citations), score,
            )

        self.validate_citations(all_citations, pool)
        assessment = self.assess_document(paragraphs)

        logger.info(
            "Parsed %d paragraphs, %d citations: overall %.2f, coverage %.0f%%, risk %s",
            len(paragraphs),
            len(all_citations),
            assessment.overall_score,
            assessment.citation_coverage,
            assessment.hallucination_risk,
        )
        return ParsedContent(
            paragraphs=paragraphs, citations=all_citations, validation=assessment
        )

    # ── Citation Validation ──────────────────────────────────────

    def validate_citation(
        self, citation: ExtractedCitation, pool: list[CandidateSource]
    ) -> CitationValidation:
        """Check an existing citation's sentence against the pool.

        Updates the citation's validation record and returns the verdict.
        """
        match_bar = round(self.config.citation_match_threshold, 10)
        match = self.matcher.match_source(citation.claim_text, pool, match_bar, strict=True)
        issues: list[ValidationIssue] = []

        if match is None:
            issues.append(ValidationIssue(
                type="missing_source",
                severity="high",
                description="Citation references unavailable source",
                start=citation.start,
                end=citation.end,
            ))
            is_valid, score = False, _UNSUPPORTED_SCORE
        else:
            is_valid, score = True, match.similarity
            if match.similarity < self.config.citation_validation_threshold:
                issues.append(ValidationIssue(
                    type="weak_citation",
                    severity="medium",
                    description="Low similarity between claim and source",
                    start=citation.start,
                    end=citation.end,
                ))

        citation.validation = CitationCheck(
            is_valid=is_valid,
            confidence=score,
            issues=[issue.description for issue in issues],
        )
        return CitationValidation(
            citation_id=citation.id, is_valid=is_valid, score=score, issues=issues
        )

    def validate_citations(
        self, citations: list[ExtractedCitation], pool: list[CandidateSource]
    ) -> list[CitationValidation]:
        validations = [self.validate_citation(c, pool) for c in citations]
        invalid = sum(1 for v in validations if not v.is_valid)
        if invalid:
            logger.warning("%d/%d citations have no supporting source", invalid, len(validations))
        return validations

    # ── Paragraph Citation Generation ────────────────────────────

    def citation_strength(self, similarity: float) -> CitationStrength:
        if similarity >= self.config.strong_citation_threshold:
            return "strong"
        if similarity >= self.config.moderate_citation_threshold:
            return "moderate"
        return "weak"

    def generate_citations_for_paragraph(self, request: CitationRequest) -> CitationResponse:
        """Attach the best supporting passages to each claim of a paragraph."""
        bar = (
            request.minimum_similarity
            if request.minimum_similarity is not None
            else self.config.minimum_similarity
        )
        claims = self.claim_extractor.extract_claims(request.text)
        required = [c for c in claims if c.needs_citation]

        citations: list[CitationSource] = []
        issues: list[ValidationIssue] = []
        validations: list[CitationValidation] = []
        suggestions: list[CitationSuggestion] = []
        covered = 0

        for n, claim in enumerate(required):
            ranked = self.matcher.score_pool(claim.text, request.context)
            supporting = [s for s in ranked if s.similarity >= bar][:_TOP_K_SOURCES]
            best = ranked[0] if ranked else None

            if supporting:
                covered += 1
                for match in supporting:
                    citation = CitationSource(
                        id=f"{request.paragraph_id}-src-{len(citations)}",
                        paragraph_id=request.paragraph_id,
                        chunk_id=match.source.chunk_id,
                        document_id=match.source.document_id,
                        text_match=claim.text,
                        source_text=match.source.content,
                        similarity_score=match.similarity,
                        strength=self.citation_strength(match.similarity),
                        position_in_paragraph=claim.start,
                        method=request.citation_method,
                        page_number=match.source.metadata.page_number,
                        section_title=match.source.metadata.section_title,
                    )
                    citations.append(citation)
                    validations.append(CitationValidation(
                        citation_id=citation.id, is_valid=True, score=match.similarity
                    ))
                continue

            claim_id = f"{request.paragraph_id}-claim-{n}"
            if best is not None and best.similarity > self.config.suggestion_threshold:
                issue = ValidationIssue(
                    type="unsupported_claim",
                    severity="medium",
                    description=(
                        f'Claim "{claim.text}" has low source support '
                        f"({round(best.similarity * 100)}%)"
                    ),
                    suggestion="Consider rephrasing or adding more specific evidence",
                    start=claim.start,
                    end=claim.end,
                )
                suggestions.append(CitationSuggestion(
                    type="strengthen_citation",
                    description="A related passage exists but does not clearly support this claim",
                    start=claim.start,
                    end=claim.end,
                    source_recommendation=best.source,
                ))
                score = best.similarity
            else:
                issue = ValidationIssue(
                    type="missing_source",
                    severity="high",
                    description=f'Claim "{claim.text}" needs supporting evidence',
                    suggestion="Add a citation or rephrase as opinion/general statement",
                    start=claim.start,
                    end=claim.end,
                )
                suggestions.append(CitationSuggestion(
                    type="add_citation",
                    description="This claim needs supporting evidence from your uploaded documents",
                    start=claim.start,
                    end=claim.end,
                    source_recommendation=best.source if best else None,
                ))
                score = _UNSUPPORTED_SCORE
            issues.append(issue)
            validations.append(CitationValidation(
                citation_id=claim_id, is_valid=False, score=score, issues=[issue]
            ))

        grounding = covered / len(required) if required else 1.0

        if grounding < self.config.minimum_grounding_quality:
            suggestions.append(CitationSuggestion(
                type="strengthen_citation",
                description=(
                    f"Paragraph grounding quality is {round(grounding * 100)}%. "
                    "Consider adding stronger evidence."
                ),
                start=0,
                end=len(request.text),
            ))

        logger.debug(
            "Paragraph %s (position %d): %d/%d claims cited, %d issues",
            request.paragraph_id, request.position, covered, len(required), len(issues),
        )
        return CitationResponse(
            citations=citations,
            grounding_quality=grounding,
            validation_issues=issues,
            validations=validations,
            suggestions=suggestions,
        )

    # ── Suggestions ──────────────────────────────────────────────

    def suggest_citations(
        self, claims: list[Claim], pool: list[CandidateSource]
    ) -> list[ClaimSourceSuggestion]:
        """Candidate passages for each claim that needs a citation, most confident first."""
        suggestions = []
        for claim in claims:
            if not claim.needs_citation:
                continue
            matches = self.matcher.find_matching_sources(
                claim.text, pool, self.config.suggestion_threshold
            )
            if not matches:
                continue
            avg_similarity = sum(m.similarity for m in matches) / len(matches)
            suggestions.append(ClaimSourceSuggestion(
                claim=claim,
                suggested_sources=[m.source for m in matches[:_TOP_K_SOURCES]],
                confidence=min(claim.confidence * avg_similarity * 1.2, 1.0),
            ))
        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions
