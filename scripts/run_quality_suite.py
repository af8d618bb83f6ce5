#!/usr/bin/env python3
"""Run a citation quality test suite and report whether its thresholds are met."""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from grounding_engine.core.config import ScoringConfig, load_scoring_config
from grounding_engine.harness.runner import QualityHarness
from grounding_engine.harness.suite import load_test_suite
from grounding_engine.scoring.grounding import GroundingScorer

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("quality_suite")

DEFAULT_SUITE = PROJECT_ROOT / "quality_suites" / "grant_writing_v1.yaml"


def run(suite_path: str, config_path: str | None, workers: int, as_json: bool) -> bool:
    config = load_scoring_config(config_path) if config_path else ScoringConfig()
    logger.info("Scoring config hash: %s", config.config_hash()[:12])

    suite = load_test_suite(suite_path)
    harness = QualityHarness(GroundingScorer(config))
    result = harness.run_suite(suite, max_workers=workers)

    if as_json:
        print(result.model_dump_json(indent=2))
        return result.thresholds_met

    logger.info("=" * 60)
    for r in result.test_results:
        logger.info(
            "%-28s %s  score=%.2f  citations=%d",
            r.test_id, "PASS" if r.passed else "FAIL", r.score, len(r.actual_citations),
        )
    logger.info("=" * 60)
    logger.info(
        "%d/%d tests passed, overall score %.2f, thresholds %s",
        result.passed_tests, result.total_tests, result.overall_score,
        "met" if result.thresholds_met else "NOT met",
    )
    for rec in result.recommendations:
        print(f"- {rec}")
    return result.thresholds_met


def main():
    parser = argparse.ArgumentParser(description="Run a citation quality test suite")
    parser.add_argument(
        "--suite", default=str(DEFAULT_SUITE), help="Path to test suite YAML file"
    )
    parser.add_argument("--config", default=None, help="Path to scoring config YAML file")
    parser.add_argument(
        "--workers", type=int, default=1, help="Run test cases on this many threads"
    )
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    args = parser.parse_args()

    ok = run(args.suite, args.config, args.workers, args.json)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
