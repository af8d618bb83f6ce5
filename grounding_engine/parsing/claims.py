"""Claim extraction: split paragraph text into sentences and classify each."""

import logging

from grounding_engine.parsing import patterns
from grounding_engine.parsing.models import Claim, ClaimType

logger = logging.getLogger(__name__)


def split_sentences(text: str, min_length: int = 0) -> list[tuple[int, int, str]]:
    """Split text at sentence-ending punctuation.

    Returns (start, end, sentence) triples with offsets into text. The
    terminal punctuation is not part of the sentence; fragments shorter than
    min_length are dropped.
    """
    spans: list[tuple[int, int]] = []
    pos = 0
    for m in patterns.SENTENCE_END_RE.finditer(text):
        spans.append((pos, m.start()))
        pos = m.end()
    if pos < len(text):
        spans.append((pos, len(text)))

    sentences = []
    for raw_start, raw_end in spans:
        chunk = text[raw_start:raw_end]
        stripped = chunk.strip()
        if not stripped or len(stripped) < min_length:
            continue
        start = raw_start + (len(chunk) - len(chunk.lstrip()))
        sentences.append((start, start + len(stripped), stripped))
    return sentences


class ClaimExtractor:
    """Rule-based claim classifier.

    Confidence values are fixed heuristics, not learned.
    """

    def __init__(self, min_claim_length: int = 10):
        self.min_claim_length = min_claim_length

    def extract_claims(self, text: str, base_offset: int = 0) -> list[Claim]:
        """Extract one claim per sentence of text, offsets shifted by base_offset."""
        claims = []
        for start, end, sentence in split_sentences(text, self.min_claim_length):
            claim_type = self.classify(sentence)
            claims.append(
                Claim(
                    text=sentence,
                    type=claim_type,
                    start=base_offset + start,
                    end=base_offset + end,
                    confidence=self.confidence(sentence, claim_type),
                    needs_citation=self.needs_citation(sentence, claim_type),
                )
            )

        logger.debug(
            "Extracted %d claims (%d need citation)",
            len(claims), sum(c.needs_citation for c in claims),
        )
        return claims

    # ── Classification ───────────────────────────────────────────

    def classify(self, sentence: str) -> ClaimType:
        if patterns.matches_any(patterns.STATISTICAL_PATTERNS, sentence):
            return "statistical"
        if patterns.METHODOLOGICAL_RE.search(sentence):
            return "methodological"
        if patterns.matches_any(patterns.FACTUAL_INDICATORS, sentence):
            return "factual"
        if patterns.OPINION_RE.search(sentence):
            return "opinion"
        return "factual"

    def needs_citation(self, sentence: str, claim_type: ClaimType) -> bool:
        if claim_type == "statistical":
            return True
        if claim_type == "factual":
            return patterns.matches_any(patterns.FACTUAL_INDICATORS, sentence)
        if claim_type == "methodological":
            return bool(patterns.PROVEN_OUTCOME_RE.search(sentence))
        return False

    def confidence(self, sentence: str, claim_type: ClaimType) -> float:
        if patterns.matches_any(patterns.STATISTICAL_PATTERNS, sentence):
            return 0.9
        if patterns.matches_any(patterns.AUTHORITY_PATTERNS, sentence):
            return 0.8
        if claim_type == "factual":
            return 0.7
        if claim_type == "methodological":
            return 0.6
        return 0.4
