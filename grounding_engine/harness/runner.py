"""Quality test harness: run declarative grounding checks and judge them against thresholds."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Union

from grounding_engine.core.config import QualityThresholds
from grounding_engine.harness.models import (
    SuiteResult,
    SuiteSummary,
    TestCase,
    TestDetails,
    TestResult,
    TestSuite,
)
from grounding_engine.parsing.claims import split_sentences
from grounding_engine.scoring.grounding import GroundingScorer
from grounding_engine.scoring.models import CitationRequest, CitationSource, RiskLevel, ValidationIssue

logger = logging.getLogger(__name__)

# Characters either side of a claim or sentence within which a citation counts
_HALLUCINATION_WINDOW = 50
_COVERAGE_WINDOW = 10
_CONSISTENCY_TOLERANCE = 0.3


# ── Type-specific Scores ─────────────────────────────────────────────


def citation_accuracy(citations: list[CitationSource], expected_sources: list[str]) -> float:
    """Share of citations pointing at an expected document or mentioning one."""
    if not expected_sources:
        return 1.0
    if not citations:
        return 0.0

    expected = set(expected_sources)
    correct = 0
    for c in citations:
        if c.document_id in expected or any(
            e in (c.section_title or "") or e in c.source_text for e in expected_sources
        ):
            correct += 1
    return correct / len(citations)


def citation_coverage(text: str, citations: list[CitationSource], min_length: int = 10) -> float:
    """Share of sentences with a citation anchored in or near them."""
    sentences = split_sentences(text, min_length)
    if not sentences:
        return 1.0
    cited = sum(
        1
        for start, end, _ in sentences
        if any(
            start - _COVERAGE_WINDOW <= c.position_in_paragraph <= end + _COVERAGE_WINDOW
            for c in citations
        )
    )
    return cited / len(sentences)


def citation_consistency(citations: list[CitationSource]) -> float:
    """Share of citation pairs with the same method and similar strength."""
    if len(citations) < 2:
        return 1.0
    consistent = total = 0
    for i, a in enumerate(citations):
        for b in citations[i + 1:]:
            total += 1
            if a.method == b.method and abs(a.similarity_score - b.similarity_score) < _CONSISTENCY_TOLERANCE:
                consistent += 1
    return consistent / total


def hallucination_risk(rate: float) -> RiskLevel:
    if rate > 0.3:
        return "high"
    if rate > 0.15:
        return "medium"
    return "low"


# ── Harness ──────────────────────────────────────────────────────────


class QualityHarness:
    """Runs test suites through a GroundingScorer.

    A failing or malformed test case never aborts the suite; it is recorded as
    a failed result.
    """

    def __init__(self, scorer: Optional[GroundingScorer] = None):
        self.scorer = scorer or GroundingScorer()

    def run_suite(self, suite: TestSuite, max_workers: int = 1) -> SuiteResult:
        """Run every test in the suite and aggregate the results in suite order."""
        start = time.perf_counter()
        logger.info("Starting quality suite '%s' (%d tests)", suite.name, len(suite.tests))

        jobs = list(enumerate(suite.tests))

        def run(job):
            index, entry = job
            return self._run_guarded(entry, index, suite.thresholds)

        if max_workers > 1 and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                results = list(pool.map(run, jobs))
        else:
            results = [run(job) for job in jobs]

        passed = sum(1 for r in results if r.passed)
        overall = sum(r.score for r in results) / len(results) if results else 0.0
        summary = self.summarize(results)
        thresholds_met = self.check_thresholds(summary, suite.thresholds)

        suite_result = SuiteResult(
            suite_name=suite.name,
            total_tests=len(results),
            passed_tests=passed,
            overall_score=overall,
            execution_time=time.perf_counter() - start,
            thresholds_met=thresholds_met,
            test_results=results,
            summary=summary,
            recommendations=self.recommendations(summary, suite.thresholds),
        )
        logger.info(
            "Suite '%s' complete: %d/%d passed, overall %.2f, thresholds %s",
            suite.name, passed, len(results), overall, "met" if thresholds_met else "NOT met",
        )
        return suite_result

    def _run_guarded(
        self, entry: Union[TestCase, Any], index: int, thresholds: QualityThresholds
    ) -> TestResult:
        if isinstance(entry, TestCase):
            test_id, test_name = entry.id, entry.name
        elif isinstance(entry, dict):
            test_id = str(entry.get("id") or f"test-{index}")
            test_name = str(entry.get("name") or test_id)
        else:
            test_id = test_name = f"test-{index}"

        try:
            test = entry if isinstance(entry, TestCase) else TestCase.model_validate(entry)
            result = self.run_test(test, thresholds)
        except Exception as e:
            logger.error("Test %s failed with error: %s", test_id, e)
            return TestResult(
                test_id=test_id,
                test_name=test_name,
                passed=False,
                score=0.0,
                issues=[ValidationIssue(
                    type="potential_hallucination",
                    severity="high",
                    description=f"Test execution failed: {e}",
                )],
            )

        logger.info(
            "Test %s: %s (score %.2f)", test_id, "PASSED" if result.passed else "FAILED", result.score
        )
        return result

    def run_test(self, test: TestCase, thresholds: QualityThresholds) -> TestResult:
        """Run one test case; exceptions propagate to the caller."""
        start = time.perf_counter()
        response = self.scorer.generate_citations_for_paragraph(CitationRequest(
            text=test.input_text,
            context=test.available_context,
            paragraph_id=f"test-{test.id}",
        ))
        citations = response.citations
        expected = self.expected_score(test, thresholds)
        details = TestDetails()

        if test.type == "grounding":
            score = response.grounding_quality
            passed = score >= expected
            details.grounding_quality = score
        elif test.type == "accuracy":
            score = citation_accuracy(citations, test.expected_sources)
            passed = score >= expected
            details.citation_accuracy = score
        elif test.type == "hallucination":
            rate = self.hallucination_rate(test.input_text, citations)
            score = 1.0 - rate
            if test.expected_score is not None:
                passed = score >= test.expected_score
            else:
                passed = rate <= thresholds.maximum_hallucination_rate
            details.hallucination_rate = rate
            details.hallucination_risk = hallucination_risk(rate)
        elif test.type == "coverage":
            score = citation_coverage(test.input_text, citations, self.scorer.config.min_claim_length)
            passed = score >= expected
            details.coverage_score = score
        else:
            score = citation_consistency(citations)
            passed = score >= expected
            details.consistency_score = score

        if test.expected_citations is not None and len(citations) < test.expected_citations:
            passed = False

        return TestResult(
            test_id=test.id,
            test_name=test.name,
            passed=passed,
            score=score,
            expected_score=expected,
            actual_citations=citations,
            issues=response.validation_issues,
            execution_time=time.perf_counter() - start,
            details=details,
        )

    def hallucination_rate(self, text: str, citations: list[CitationSource]) -> float:
        """Share of citation-needing claims with no well-matched citation nearby."""
        claims = [c for c in self.scorer.claim_extractor.extract_claims(text) if c.needs_citation]
        if not claims:
            return 0.0
        bar = self.scorer.config.minimum_similarity
        unsupported = 0
        for claim in claims:
            supported = any(
                claim.start - _HALLUCINATION_WINDOW
                <= c.position_in_paragraph
                <= claim.end + _HALLUCINATION_WINDOW
                and c.similarity_score >= bar
                for c in citations
            )
            if not supported:
                unsupported += 1
        return unsupported / len(claims)

    @staticmethod
    def expected_score(test: TestCase, thresholds: QualityThresholds) -> float:
        if test.expected_score is not None:
            return test.expected_score
        return {
            "grounding": thresholds.minimum_grounding_score,
            "accuracy": thresholds.minimum_citation_accuracy,
            "hallucination": 1.0 - thresholds.maximum_hallucination_rate,
            "coverage": thresholds.minimum_coverage,
            "consistency": thresholds.minimum_consistency_score,
        }[test.type]

    # ── Aggregation ──────────────────────────────────────────────

    @staticmethod
    def summarize(results: list[TestResult]) -> SuiteSummary:
        def mean(field: str) -> Optional[float]:
            values = [
                getattr(r.details, field) for r in results if getattr(r.details, field) is not None
            ]
            return sum(values) / len(values) if values else None

        return SuiteSummary(
            grounding_quality=mean("grounding_quality"),
            citation_accuracy=mean("citation_accuracy"),
            hallucination_rate=mean("hallucination_rate"),
            coverage=mean("coverage_score"),
            consistency=mean("consistency_score"),
        )

    @staticmethod
    def _misses(summary: SuiteSummary, thresholds: QualityThresholds) -> dict[str, bool]:
        def below(value: Optional[float], bar: float) -> bool:
            return value is not None and value < bar

        return {
            "grounding": below(summary.grounding_quality, thresholds.minimum_grounding_score),
            "accuracy": below(summary.citation_accuracy, thresholds.minimum_citation_accuracy),
            "hallucination": (
                summary.hallucination_rate is not None
                and summary.hallucination_rate > thresholds.maximum_hallucination_rate
            ),
            "coverage": below(summary.coverage, thresholds.minimum_coverage),
            "consistency": below(summary.consistency, thresholds.minimum_consistency_score),
        }

    def check_thresholds(self, summary: SuiteSummary, thresholds: QualityThresholds) -> bool:
        """True when every measured metric meets its bar; unmeasured ones are ignored."""
        return not any(self._misses(summary, thresholds).values())

    def recommendations(self, summary: SuiteSummary, thresholds: QualityThresholds) -> list[str]:
        misses = self._misses(summary, thresholds)
        recs = []
        if misses["grounding"]:
            recs.append(
                f"Improve grounding quality ({summary.grounding_quality * 100:.1f}% vs "
                f"{thresholds.minimum_grounding_score * 100:.1f}% target). "
                "Enhance source matching algorithms."
            )
        if misses["accuracy"]:
            recs.append(
                f"Improve citation accuracy ({summary.citation_accuracy * 100:.1f}% vs "
                f"{thresholds.minimum_citation_accuracy * 100:.1f}% target). "
                "Review source attribution logic."
            )
        if misses["hallucination"]:
            recs.append(
                f"Reduce hallucination rate ({summary.hallucination_rate * 100:.1f}% vs "
                f"{thresholds.maximum_hallucination_rate * 100:.1f}% maximum). "
                "Strengthen fact-checking validation."
            )
        if misses["coverage"]:
            recs.append(
                f"Increase citation coverage ({summary.coverage * 100:.1f}% vs "
                f"{thresholds.minimum_coverage * 100:.1f}% target). "
                "Add more comprehensive source attribution."
            )
        if misses["consistency"]:
            recs.append(
                f"Improve citation consistency ({summary.consistency * 100:.1f}% vs "
                f"{thresholds.minimum_consistency_score * 100:.1f}% target). "
                "Standardize citation formats and quality."
            )
        if not recs:
            recs.append("All quality thresholds met")
        return recs
