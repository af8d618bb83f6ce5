"""Match claims and citations against candidate source passages."""

import logging
import re
from typing import Callable, Optional

from grounding_engine.sources.models import CandidateSource, ScoredSource

logger = logging.getLogger(__name__)

SimilarityFn = Callable[[str, str], float]


# ── Similarity ───────────────────────────────────────────────────────


_EDGE_PUNCT_RE = re.compile(r"^[^\w$%]+|[^\w$%]+$", re.UNICODE)


def tokenize(text: str) -> set[str]:
    """Lowercased whitespace tokens with leading/trailing punctuation removed."""
    tokens = set()
    for raw in text.lower().split():
        tok = _EDGE_PUNCT_RE.sub("", raw)
        if tok:
            tokens.add(tok)
    return tokens


def jaccard_similarity(text_a: str, text_b: str) -> float:
    """Jaccard index of the two token sets (0.0-1.0)."""
    a = tokenize(text_a)
    b = tokenize(text_b)
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


# ── Matcher ──────────────────────────────────────────────────────────


class SourceMatcher:
    """Ranks candidate passages against a piece of text.

    The similarity function is pluggable so an embedding-backed scorer can be
    dropped in without touching the grounding logic.
    """

    def __init__(self, similarity_fn: SimilarityFn = jaccard_similarity):
        self.similarity_fn = similarity_fn

    def similarity(self, text_a: str, text_b: str) -> float:
        score = float(self.similarity_fn(text_a, text_b))
        return min(1.0, max(0.0, score))

    def score_pool(
        self, text: str, pool: list[CandidateSource]
    ) -> list[ScoredSource]:
        """Score every candidate, best first.

        Ties fall back to the retriever's similarity hint, then pool order.
        """
        scored = [
            (ScoredSource(source=src, similarity=self.similarity(text, src.content)), idx)
            for idx, src in enumerate(pool)
        ]
        scored.sort(
            key=lambda pair: (
                -pair[0].similarity,
                -(pair[0].source.similarity or 0.0),
                pair[1],
            )
        )
        return [s for s, _ in scored]

    def best_match(
        self, text: str, pool: list[CandidateSource]
    ) -> Optional[ScoredSource]:
        """Highest-scoring candidate regardless of any bar, or None for an empty pool."""
        ranked = self.score_pool(text, pool)
        return ranked[0] if ranked else None

    def match_source(
        self, text: str, pool: list[CandidateSource], threshold: float, strict: bool = False
    ) -> Optional[ScoredSource]:
        """Best candidate whose similarity reaches threshold (exceeds it when strict), or None."""
        best = self.best_match(text, pool)
        if best is None or best.similarity < threshold:
            return None
        if strict and best.similarity == threshold:
            return None
        return best

    def find_matching_sources(
        self, text: str, pool: list[CandidateSource], threshold: float = 0.3
    ) -> list[ScoredSource]:
        """All candidates strictly above the suggestion bar, best first."""
        matches = [s for s in self.score_pool(text, pool) if s.similarity > threshold]
        logger.debug(
            "%d/%d candidates above %.2f for '%s'",
            len(matches), len(pool), threshold, text[:40],
        )
        return matches
