"""Tests for citation-marker extraction."""

import pytest

from grounding_engine.parsing.citations import CitationExtractor


@pytest.fixture()
def extractor():
    return CitationExtractor()


def test_inline_and_numerical_markers(extractor):
    text = "Enrollment grew 20% (Smith 2021). See the ledger [3]."
    citations = extractor.extract_citations(text, "para-0")
    assert [c.source_reference for c in citations] == ["(Smith 2021)", "[3]"]
    assert [c.kind for c in citations] == ["inline", "numerical"]
    assert [c.id for c in citations] == ["para-0-cite-0", "para-0-cite-1"]


def test_claim_text_is_containing_sentence(extractor):
    text = "First point stands alone. Enrollment grew 20% (Smith 2021). Done."
    citation = extractor.extract_citations(text, "p")[0]
    assert citation.claim_text == "Enrollment grew 20% (Smith 2021)"


def test_overlapping_patterns_reported_once(extractor):
    text = "Costs are itemised (see Budget Narrative 2023) for reviewers."
    citations = extractor.extract_citations(text, "p")
    assert len(citations) == 1
    assert citations[0].kind == "inline"


def test_kinds(extractor):
    assert extractor.kind("[1, 2]") == "numerical"
    assert extractor.kind("[4-6]") == "numerical"
    assert extractor.kind("[Annual Report]") == "implicit"
    assert extractor.kind("(see Budget Narrative)") == "implicit"
    assert extractor.kind("(Jones et al., 2019)") == "inline"


def test_as_noted_in(extractor):
    text = "Attendance doubled, as noted in the board minutes. Next steps follow."
    citations = extractor.extract_citations(text, "p")
    assert len(citations) == 1
    assert citations[0].source_reference == "as noted in the board minutes"
    assert citations[0].kind == "implicit"


def test_results_ordered_by_position(extractor):
    text = "[Annual Report] first, then (Lee 2020) and (cf. Program Guide)."
    citations = extractor.extract_citations(text, "p")
    starts = [c.start for c in citations]
    assert starts == sorted(starts)
    assert len(citations) == 3


def test_base_offset(extractor):
    text = "Growth was steady (Smith 2021)."
    citation = extractor.extract_citations(text, "p", base_offset=40)[0]
    assert citation.start == 40 + text.index("(Smith 2021)")
    assert citation.end == citation.start + len("(Smith 2021)")


def test_default_validation_record(extractor):
    citation = extractor.extract_citations("Growth was steady [2].", "p")[0]
    assert citation.validation.is_valid
    assert citation.validation.confidence == 0.8
    assert citation.validation.issues == []


def test_no_markers(extractor):
    assert extractor.extract_citations("Nothing cited in this sentence.", "p") == []
