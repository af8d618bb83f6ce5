"""Plain-text export of a cited draft and its citation quality report."""

import logging
from typing import Optional

from grounding_engine.exporters.formatter import CitationFormatter, ExportOptions, FormattedCitation
from grounding_engine.scoring.models import ParagraphCitations

logger = logging.getLogger(__name__)

RULE = "=" * 50


def _flatten_sources(paragraphs: list[ParagraphCitations]):
    return [src for p in paragraphs for src in p.sources]


def insert_citations_into_content(
    content: str,
    paragraphs: list[ParagraphCitations],
    formatted: list[FormattedCitation],
) -> str:
    """Place each inline marker right after the claim it supports.

    ``formatted`` must line up with the paragraphs' sources in order. A
    paragraph whose text no longer appears in content is left alone.
    """
    result = content
    index = 0
    for paragraph in paragraphs:
        markers = []
        for src in paragraph.sources:
            anchor = min(src.position_in_paragraph + len(src.text_match), len(paragraph.paragraph_text))
            markers.append((anchor, index, formatted[index].inline_text))
            index += 1

        if paragraph.paragraph_text not in result:
            logger.warning("Paragraph %s not found in content; citations skipped", paragraph.paragraph_id)
            continue

        cited = paragraph.paragraph_text
        # Right to left so earlier anchors stay valid
        for anchor, _, marker in sorted(markers, reverse=True):
            cited = cited[:anchor] + " " + marker + cited[anchor:]
        result = result.replace(paragraph.paragraph_text, cited, 1)

    return result


def create_cited_text(
    content: str,
    paragraphs: list[ParagraphCitations],
    options: Optional[ExportOptions] = None,
    formatter: Optional[CitationFormatter] = None,
) -> str:
    """Copy-paste ready text with citations and, if requested, references."""
    options = options or ExportOptions()
    formatter = formatter or CitationFormatter()
    formatted = formatter.format_citations(_flatten_sources(paragraphs), options)

    text = insert_citations_into_content(content, paragraphs, formatted)

    if options.format == "bibliography" and formatted:
        text += f"\n\n{RULE}\nREFERENCES\n{RULE}\n\n"
        text += "".join(f"{fc.bibliography_entry}\n\n" for fc in formatted)
    elif options.format == "footnote" and formatted:
        text += f"\n\n{RULE}\nNOTES\n{RULE}\n\n"
        text += "".join(f"{fc.footnote_text}\n" for fc in formatted)

    return text


def _pct(part: int | float, whole: int | float) -> float:
    return part / whole * 100 if whole else 0.0


def generate_citation_report(
    paragraphs: list[ParagraphCitations], total_paragraphs: Optional[int] = None
) -> str:
    """Human-readable summary of citation coverage and strength."""
    if total_paragraphs is None:
        total_paragraphs = len(paragraphs)
    sources = _flatten_sources(paragraphs)
    cited = sum(1 for p in paragraphs if p.sources)
    unique_documents = len({s.document_id for s in sources})
    average_grounding = (
        sum(p.grounding_quality for p in paragraphs) / len(paragraphs) if paragraphs else 0.0
    )
    coverage = _pct(cited, total_paragraphs)

    strengths = {"strong": 0, "moderate": 0, "weak": 0}
    for s in sources:
        strengths[s.strength] += 1

    if average_grounding >= 0.8:
        grounding_verdict = "✓ Excellent grounding quality"
    elif average_grounding >= 0.6:
        grounding_verdict = "△ Good grounding quality with room for improvement"
    else:
        grounding_verdict = "✗ Grounding quality needs significant improvement"

    if coverage >= 80:
        coverage_verdict = "✓ Good citation coverage"
    elif coverage >= 60:
        coverage_verdict = "△ Moderate citation coverage"
    else:
        coverage_verdict = "✗ Low citation coverage - more evidence needed"

    lines = [
        "CITATION QUALITY REPORT",
        "========================",
        "",
        "Overall Statistics:",
        f"- Total Paragraphs: {total_paragraphs}",
        f"- Paragraphs with Citations: {cited}",
        f"- Citation Coverage: {coverage:.1f}%",
        f"- Average Grounding Quality: {average_grounding * 100:.1f}%",
        "",
        "Source Analysis:",
        f"- Total Citations: {len(sources)}",
        f"- Unique Source Documents: {unique_documents}",
    ]
    for label, key in (("Strong", "strong"), ("Moderate", "moderate"), ("Weak", "weak")):
        count = strengths[key]
        lines.append(f"- {label} Citations: {count} ({_pct(count, len(sources)):.1f}%)")
    lines += [
        "",
        "Quality Assessment:",
        grounding_verdict,
        coverage_verdict,
    ]
    return "\n".join(lines) + "\n"
