"""Citation extraction: find citation markers already present in draft text."""

import logging

from grounding_engine.parsing import patterns
from grounding_engine.parsing.models import CitationKind, ExtractedCitation

logger = logging.getLogger(__name__)


class CitationExtractor:
    """Scans text with the ordered citation-marker patterns."""

    def extract_citations(
        self, text: str, paragraph_id: str, base_offset: int = 0
    ) -> list[ExtractedCitation]:
        """Return the citation markers in text, ordered by position.

        A marker matched by an earlier pattern is not reported again when a
        later pattern matches inside the same span.
        """
        spans: list[tuple[int, int]] = []
        for pattern in patterns.CITATION_PATTERNS:
            for m in pattern.finditer(text):
                start, end = m.span()
                if any(s <= start and end <= e for s, e in spans):
                    continue
                spans.append((start, end))
        spans.sort()

        citations = []
        for n, (start, end) in enumerate(spans):
            marker = text[start:end]
            citations.append(
                ExtractedCitation(
                    id=f"{paragraph_id}-cite-{n}",
                    paragraph_id=paragraph_id,
                    claim_text=self.sentence_around(text, start, end),
                    source_reference=marker,
                    kind=self.kind(marker),
                    start=base_offset + start,
                    end=base_offset + end,
                )
            )

        if citations:
            logger.debug("Paragraph %s: %d citation markers", paragraph_id, len(citations))
        return citations

    @staticmethod
    def kind(marker: str) -> CitationKind:
        if patterns.NUMERIC_BRACKET_RE.match(marker):
            return "numerical"
        if patterns.YEAR_PAREN_RE.search(marker):
            return "inline"
        return "implicit"

    @staticmethod
    def sentence_around(text: str, start: int, end: int) -> str:
        """The sentence containing the span [start, end)."""
        sentence_start = 0
        for m in patterns.SENTENCE_END_RE.finditer(text, 0, start):
            sentence_start = m.end()
        m = patterns.SENTENCE_END_RE.search(text, end)
        sentence_end = m.start() if m else len(text)
        return text[sentence_start:sentence_end].strip()
