#!/usr/bin/env python3
"""Check a draft against a JSON pool of candidate source passages."""

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from grounding_engine.core.config import ScoringConfig, load_scoring_config
from grounding_engine.exporters import export_all
from grounding_engine.exporters.cited_text import generate_citation_report
from grounding_engine.exporters.formatter import ExportOptions
from grounding_engine.scoring.evidence_map import (
    build_evidence_map,
    identify_unsupported_paragraphs,
    paragraph_findings,
)
from grounding_engine.scoring.grounding import GroundingScorer, split_paragraphs
from grounding_engine.scoring.models import CitationRequest, ParagraphCitations
from grounding_engine.sources.models import CandidateSource

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("validate_draft")


def load_pool(path: str) -> list[CandidateSource]:
    with open(path) as f:
        raw = json.load(f)
    return [CandidateSource.model_validate(item) for item in raw]


def cite_paragraphs(
    scorer: GroundingScorer, content: str, pool: list[CandidateSource]
) -> list[ParagraphCitations]:
    cited = []
    for order, (offset, text) in enumerate(
        split_paragraphs(content, scorer.config.min_paragraph_length)
    ):
        paragraph_id = f"para-{order}"
        response = scorer.generate_citations_for_paragraph(CitationRequest(
            text=text, context=pool, paragraph_id=paragraph_id, position=offset
        ))
        cited.append(ParagraphCitations(
            paragraph_id=paragraph_id,
            paragraph_text=text,
            order=order,
            grounding_quality=response.grounding_quality,
            validation_issues=response.validation_issues,
            sources=response.citations,
        ))
    return cited


def main():
    parser = argparse.ArgumentParser(description="Validate the grounding of a draft")
    parser.add_argument("--draft", required=True, help="Path to the draft text file")
    parser.add_argument("--sources", required=True, help="Path to candidate pool JSON file")
    parser.add_argument("--config", default=None, help="Path to scoring config YAML file")
    parser.add_argument(
        "--style", choices=("apa", "grant_standard", "default"), default="grant_standard"
    )
    parser.add_argument(
        "--format", choices=("inline", "footnote", "bibliography"), default="bibliography"
    )
    parser.add_argument("--out", default=None, help="Write cited text and reports here")
    args = parser.parse_args()

    config = load_scoring_config(args.config) if args.config else ScoringConfig()
    scorer = GroundingScorer(config)

    content = Path(args.draft).read_text(encoding="utf-8")
    pool = load_pool(args.sources)
    logger.info("Draft: %s (%d chars), pool: %d passages", args.draft, len(content), len(pool))

    parsed = scorer.parse_content(content, pool)
    assessment = parsed.validation
    logger.info(
        "Overall %.2f, coverage %.0f%%, hallucination risk %s",
        assessment.overall_score, assessment.citation_coverage, assessment.hallucination_risk,
    )
    for issue in assessment.issues:
        logger.warning("[%s] %s", issue.severity, issue.description)

    cited = cite_paragraphs(scorer, content, pool)
    for paragraph in cited:
        for finding in paragraph_findings(paragraph, scorer):
            logger.warning("%s [%s] %s", paragraph.paragraph_id, finding.severity, finding.description)
    for analysis in identify_unsupported_paragraphs(cited, scorer):
        logger.warning(
            "%s grounding %.0f%%: %s",
            analysis.paragraph_id, analysis.grounding_quality * 100,
            "; ".join(analysis.recommendations),
        )
    print(generate_citation_report(cited))

    if args.out:
        options = ExportOptions(style=args.style, format=args.format)
        paths = export_all(
            content, cited, args.out, options, evidence_map=build_evidence_map(cited, scorer)
        )
        logger.info("Exports: %s", json.dumps(paths, indent=2))

    sys.exit(1 if assessment.hallucination_risk == "high" else 0)


if __name__ == "__main__":
    main()
