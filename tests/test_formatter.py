"""Tests for citation formatting styles."""

import datetime

import pytest

from grounding_engine.exporters.formatter import CitationFormatter, ExportOptions
from grounding_engine.scoring.models import CitationSource


@pytest.fixture()
def formatter():
    return CitationFormatter(document_year=2024)


def _source(section_title="Annual Report", page_number=4, n=0):
    return CitationSource(
        id=f"p-src-{n}",
        paragraph_id="p",
        chunk_id=f"c{n}",
        document_id="annual-report",
        text_match="We served 300 families",
        source_text="We served 300 families in 2023.",
        similarity_score=0.8,
        strength="strong",
        position_in_paragraph=0,
        page_number=page_number,
        section_title=section_title,
    )


def _one(formatter, source, **options):
    return formatter.format_citations([source], ExportOptions(**options))[0]


# ── Inline ───────────────────────────────────────────────────────────


def test_apa_inline(formatter):
    assert _one(formatter, _source(), style="apa").inline_text == "(Annual Report, 4)"
    assert _one(formatter, _source(page_number=None), style="apa").inline_text == "(Annual Report, n.p.)"
    assert _one(formatter, _source(None, None), style="apa").inline_text == "(Document, n.p.)"


def test_grant_standard_inline(formatter):
    assert _one(formatter, _source()).inline_text == "(Annual Report, p. 4)"
    assert _one(formatter, _source(page_number=None)).inline_text == "(Annual Report)"


def test_default_inline_numbers_footnotes(formatter):
    sources = [_source(n=0), _source(n=1)]
    formatted = formatter.format(sources, style="default", format="footnote")
    assert [f.inline_text for f in formatted] == ["[1]", "[2]"]


def test_default_inline_uses_title(formatter):
    assert _one(formatter, _source(), style="default").inline_text == "[Annual Report]"
    assert _one(formatter, _source(None), style="default").inline_text == "[Source]"


# ── Bibliography ─────────────────────────────────────────────────────


def test_bibliography_entries(formatter):
    assert _one(formatter, _source(), style="apa").bibliography_entry == (
        "Annual Report. (2024). Organization Documents."
    )
    assert _one(formatter, _source()).bibliography_entry == (
        "Annual Report. Organizational Resource Documents."
    )
    assert _one(formatter, _source(), style="default").bibliography_entry == (
        "Annual Report - Organizational Documentation"
    )


def test_year_defaults_to_current():
    assert CitationFormatter().document_year == datetime.date.today().year


# ── Footnotes ────────────────────────────────────────────────────────


def test_footnote_format(formatter):
    formatted = formatter.format([_source(), _source(page_number=None, n=1)], format="footnote")
    assert [f.footnote_text for f in formatted] == ["1. Annual Report, page 4.", "2. Annual Report."]
    assert [f.citation_number for f in formatted] == [1, 2]


def test_no_footnote_outside_footnote_format(formatter):
    formatted = _one(formatter, _source(), format="bibliography")
    assert formatted.footnote_text is None
    assert formatted.citation_number is None


# ── Options ──────────────────────────────────────────────────────────


def test_page_numbers_can_be_omitted(formatter):
    assert _one(formatter, _source(), include_page_numbers=False).inline_text == "(Annual Report)"


def test_section_titles_can_be_omitted(formatter):
    formatted = _one(formatter, _source(), include_section_titles=False)
    assert formatted.inline_text == "(Source Document, p. 4)"


def test_format_matches_format_citations(formatter):
    sources = [_source(), _source(n=1)]
    assert formatter.format(sources, "apa", "inline") == formatter.format_citations(
        sources, ExportOptions(style="apa", format="inline")
    )


def test_empty_input(formatter):
    assert formatter.format([]) == []
