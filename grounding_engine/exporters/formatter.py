"""Citation formatting for export: inline markers, footnotes and bibliography entries."""

import datetime
import logging
from typing import Literal, Optional

from pydantic import BaseModel

from grounding_engine.scoring.models import CitationSource

logger = logging.getLogger(__name__)

CitationStyle = Literal["apa", "grant_standard", "default"]
CitationFormat = Literal["inline", "footnote", "bibliography"]


class ExportOptions(BaseModel):
    style: CitationStyle = "grant_standard"
    format: CitationFormat = "inline"
    include_page_numbers: bool = True
    include_section_titles: bool = True


class FormattedCitation(BaseModel):
    """Rendered strings for one citation."""

    inline_text: str
    bibliography_entry: str
    footnote_text: Optional[str] = None
    citation_number: Optional[int] = None


class CitationFormatter:
    """Renders citation sources in one of the supported styles.

    Numbering is 1-based in input order. ``document_year`` stands in for the
    publication year in APA bibliography entries.
    """

    def __init__(self, document_year: Optional[int] = None):
        self.document_year = document_year or datetime.date.today().year

    def format(
        self,
        citations: list[CitationSource],
        style: CitationStyle = "grant_standard",
        format: CitationFormat = "inline",
    ) -> list[FormattedCitation]:
        return self.format_citations(citations, ExportOptions(style=style, format=format))

    def format_citations(
        self, citations: list[CitationSource], options: ExportOptions
    ) -> list[FormattedCitation]:
        formatted = []
        for number, citation in enumerate(citations, start=1):
            is_footnote = options.format == "footnote"
            formatted.append(FormattedCitation(
                inline_text=self.inline(citation, options, number),
                bibliography_entry=self.bibliography_entry(citation, options),
                footnote_text=self.footnote(citation, options, number) if is_footnote else None,
                citation_number=number if is_footnote else None,
            ))
        logger.debug("Formatted %d citations (%s, %s)", len(formatted), options.style, options.format)
        return formatted

    # ── Templates ────────────────────────────────────────────────

    @staticmethod
    def _title(citation: CitationSource, options: ExportOptions, fallback: str) -> str:
        if options.include_section_titles and citation.section_title:
            return citation.section_title
        return fallback

    @staticmethod
    def _page(citation: CitationSource, options: ExportOptions) -> Optional[int]:
        return citation.page_number if options.include_page_numbers else None

    def inline(self, citation: CitationSource, options: ExportOptions, number: int) -> str:
        page = self._page(citation, options)
        if options.style == "apa":
            title = self._title(citation, options, "Document")
            return f"({title}, {page if page else 'n.p.'})"
        if options.style == "grant_standard":
            title = self._title(citation, options, "Source Document")
            return f"({title}, p. {page})" if page else f"({title})"
        if options.format == "footnote":
            return f"[{number}]"
        return f"[{self._title(citation, options, 'Source')}]"

    def bibliography_entry(self, citation: CitationSource, options: ExportOptions) -> str:
        title = self._title(citation, options, "Source Document")
        if options.style == "apa":
            return f"{title}. ({self.document_year}). Organization Documents."
        if options.style == "grant_standard":
            return f"{title}. Organizational Resource Documents."
        return f"{title} - Organizational Documentation"

    def footnote(self, citation: CitationSource, options: ExportOptions, number: int) -> str:
        title = self._title(citation, options, "Source Document")
        page = self._page(citation, options)
        return f"{number}. {title}, page {page}." if page else f"{number}. {title}."
