"""Sparse TF-IDF vectors over content blocks."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set

from .constants import MIN_TOKEN_LENGTH, SPLIT_PATTERN

SparseVector = Dict[str, float]


def tokenize(text: str, *, min_length: int = MIN_TOKEN_LENGTH) -> List[str]:
    """Split ``text`` on whitespace and punctuation, lowercased, dropping short tokens."""
    if not text or not text.strip():
        return []
    return [
        token.lower()
        for token in SPLIT_PATTERN.split(text)
        if len(token) >= min_length
    ]


@dataclass
class TermStatistics:
    """Vocabulary and document frequencies collected over one block set."""

    document_count: int
    document_frequency: Dict[str, int] = field(default_factory=dict)

    @property
    def vocabulary(self) -> Set[str]:
        return set(self.document_frequency)

    def idf(self, term: str) -> float:
        # Smoothed with 1 + df so ubiquitous terms go negative rather than undefined.
        df = self.document_frequency.get(term, 0)
        return math.log(self.document_count / (1.0 + df))


class TfidfVectorizer:
    """Builds term statistics over a block set and weights each block against them."""

    def __init__(self, *, min_token_length: int = MIN_TOKEN_LENGTH) -> None:
        self.min_token_length = max(1, min_token_length)

    def tokenize(self, text: str) -> List[str]:
        return tokenize(text, min_length=self.min_token_length)

    def fit(self, token_lists: Sequence[Sequence[str]]) -> TermStatistics:
        frequency: Counter[str] = Counter()
        for tokens in token_lists:
            frequency.update(set(tokens))
        return TermStatistics(
            document_count=len(token_lists),
            document_frequency=dict(frequency),
        )

    def term_frequencies(self, tokens: Sequence[str]) -> SparseVector:
        if not tokens:
            return {}
        total = len(tokens)
        return {term: count / total for term, count in Counter(tokens).items()}

    def transform(self, tokens: Sequence[str], stats: TermStatistics) -> SparseVector:
        return {
            term: tf * stats.idf(term)
            for term, tf in self.term_frequencies(tokens).items()
        }

    def fit_transform(self, texts: Iterable[str]) -> tuple[TermStatistics, List[SparseVector]]:
        token_lists = [self.tokenize(text) for text in texts]
        stats = self.fit(token_lists)
        return stats, [self.transform(tokens, stats) for tokens in token_lists]


def magnitude(vector: SparseVector) -> float:
    return math.sqrt(sum(value * value for value in vector.values()))


def cosine_similarity(
    left: SparseVector,
    right: SparseVector,
    *,
    left_norm: float | None = None,
    right_norm: float | None = None,
) -> float:
    """Cosine of two sparse vectors; 0.0 when either has zero magnitude."""
    left_norm = magnitude(left) if left_norm is None else left_norm
    right_norm = magnitude(right) if right_norm is None else right_norm
    if left_norm == 0.0 or right_norm == 0.0:
        return 0.0
    if len(left) > len(right):
        left, right = right, left
    dot = sum(value * right.get(term, 0.0) for term, value in left.items())
    return dot / (left_norm * right_norm)


__all__ = [
    "SparseVector",
    "TermStatistics",
    "TfidfVectorizer",
    "cosine_similarity",
    "magnitude",
    "tokenize",
]
