"""Lexical cues for claim classification and citation-marker detection."""

import re

# ── Claim Cues ───────────────────────────────────────────────────────

# Numeric evidence: percentages, currency, four-digit years, large counts
STATISTICAL_PATTERNS = [
    re.compile(r"\d+\.?\d*\s*%"),
    re.compile(r"\$[\d,]+\.?\d*"),
    re.compile(r"\b\d{4}\b"),
    re.compile(r"\b\d+\s*(?:million|billion|thousand)", re.IGNORECASE),
]

# Appeals to an outside authority or body of evidence
AUTHORITY_PATTERNS = [
    re.compile(r"according to\s+[^.]+", re.IGNORECASE),
    re.compile(r"research\s+(?:shows|indicates|demonstrates)", re.IGNORECASE),
    re.compile(r"studies?\s+(?:show|indicate|demonstrate|reveal)", re.IGNORECASE),
    re.compile(r"data\s+(?:shows|indicates|demonstrates|reveals)", re.IGNORECASE),
    re.compile(r"report\s+(?:shows|indicates|states)", re.IGNORECASE),
    re.compile(r"survey\s+(?:shows|found|indicates)", re.IGNORECASE),
    re.compile(r"evidence\s+suggests?", re.IGNORECASE),
    re.compile(r"findings\s+(?:show|indicate)", re.IGNORECASE),
    re.compile(r"analysis\s+(?:shows|reveals|indicates)", re.IGNORECASE),
    re.compile(r"(?:research|study|analysis|data)\s+from\s+", re.IGNORECASE),
]

FACTUAL_INDICATORS = STATISTICAL_PATTERNS + AUTHORITY_PATTERNS

METHODOLOGICAL_RE = re.compile(
    r"\b(?:approach|method|process|procedure|implement|develop)\b", re.IGNORECASE
)

OPINION_RE = re.compile(
    r"\b(?:believe|think|feel|opinion|perspective|view)\b", re.IGNORECASE
)

# Methodological statements that assert a specific, checkable outcome
PROVEN_OUTCOME_RE = re.compile(
    r"\b(?:research shows|studies indicate|proven|effective)\b", re.IGNORECASE
)

# ── Citation Markers ─────────────────────────────────────────────────

# Order matters: earlier patterns claim a span first
CITATION_PATTERNS = [
    re.compile(r"\([^)]*\d{4}[^)]*\)"),                       # (Author 2023)
    re.compile(r"\[[^\]]*\]"),                                # [1], [Annual Report]
    re.compile(r"\(see\s+[^)]+\)", re.IGNORECASE),            # (see Document)
    re.compile(r"\(cf\.\s+[^)]+\)", re.IGNORECASE),           # (cf. Source)
    re.compile(r"\"[^\"]+\"\s*\([^)]+\)"),                    # "Quote" (Source)
    re.compile(r"as\s+(?:noted|stated|mentioned)\s+in\s+[^.]+", re.IGNORECASE),
]

NUMERIC_BRACKET_RE = re.compile(r"^\[\s*\d+(?:\s*[,–-]\s*\d+)*\s*\]$")
YEAR_PAREN_RE = re.compile(r"\([^)]*\d{4}[^)]*\)")

# ── Sentence Boundaries ──────────────────────────────────────────────

# Terminal punctuation followed by whitespace or end of text; decimals survive
SENTENCE_END_RE = re.compile(r"[.!?]+(?=\s|$)")


def matches_any(patterns: list[re.Pattern], text: str) -> bool:
    """True if any compiled pattern finds a match in text."""
    return any(p.search(text) for p in patterns)
