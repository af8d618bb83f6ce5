"""Export convenience function."""

import json
import logging
from pathlib import Path
from typing import Optional

from grounding_engine.exporters.cited_text import create_cited_text, generate_citation_report
from grounding_engine.exporters.formatter import CitationFormatter, ExportOptions
from grounding_engine.scoring.models import EvidenceMap, ParagraphCitations

logger = logging.getLogger(__name__)


def export_all(
    content: str,
    paragraphs: list[ParagraphCitations],
    output_dir: str,
    options: Optional[ExportOptions] = None,
    formatter: Optional[CitationFormatter] = None,
    evidence_map: Optional[EvidenceMap] = None,
) -> dict:
    """Run all exports and return dict of file paths created."""
    options = options or ExportOptions()
    formatter = formatter or CitationFormatter()

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    paths = {}

    cited_path = str(out / "cited_draft.txt")
    with open(cited_path, "w", encoding="utf-8") as f:
        f.write(create_cited_text(content, paragraphs, options, formatter))
    paths["cited_text"] = cited_path

    report_path = str(out / "citation_report.txt")
    with open(report_path, "w", encoding="utf-8") as f:
        f.write(generate_citation_report(paragraphs))
    paths["citation_report"] = report_path

    citations_path = str(out / "citations.json")
    sources = [src for p in paragraphs for src in p.sources]
    formatted = formatter.format_citations(sources, options)
    with open(citations_path, "w", encoding="utf-8") as f:
        json.dump(
            [
                {"source": src.model_dump(), "formatted": fc.model_dump()}
                for src, fc in zip(sources, formatted)
            ],
            f,
            indent=2,
        )
    paths["citations_json"] = citations_path

    if evidence_map is not None:
        map_path = str(out / "evidence_map.json")
        with open(map_path, "w", encoding="utf-8") as f:
            f.write(evidence_map.model_dump_json(indent=2))
        paths["evidence_map"] = map_path

    logger.info("All exports written to %s", output_dir)
    return paths
