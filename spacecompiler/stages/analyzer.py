"""Keyword and readability annotations for parsed resources."""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, List

from ..models import ContentBlock, ParsedResource
from .base import SemanticAnalyzer

_WORD_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_'-]*")
_SENTENCE_PATTERN = re.compile(r"[.!?]+(?:\s|$)")
_STOPWORDS = {
    "about",
    "after",
    "also",
    "and",
    "any",
    "are",
    "because",
    "been",
    "being",
    "between",
    "both",
    "but",
    "each",
    "for",
    "from",
    "has",
    "have",
    "into",
    "its",
    "more",
    "not",
    "only",
    "other",
    "over",
    "some",
    "than",
    "that",
    "the",
    "their",
    "them",
    "there",
    "these",
    "they",
    "this",
    "those",
    "through",
    "under",
    "very",
    "was",
    "were",
    "when",
    "where",
    "which",
    "will",
    "with",
    "within",
    "you",
    "your",
}


class KeywordAnalyzer(SemanticAnalyzer):
    """Adds word counts, sentence statistics and top keywords to each block."""

    def __init__(self, *, max_keywords: int = 5) -> None:
        self.max_keywords = max(0, max_keywords)

    def analyze(self, resource: ParsedResource) -> ParsedResource:
        totals: Counter[str] = Counter()
        word_count = 0
        for block in resource.blocks:
            words = _words(block.content)
            counts = Counter(word for word in words if _is_keyword(word))
            totals.update(counts)
            word_count += len(words)
            block.annotations.update(self._block_annotations(block, words, counts))

        resource.metadata.update(
            {
                "block_count": len(resource.blocks),
                "word_count": word_count,
                "keywords": [word for word, _ in totals.most_common(self.max_keywords)],
            }
        )
        return resource

    def _block_annotations(
        self, block: ContentBlock, words: List[str], counts: Counter[str]
    ) -> Dict[str, object]:
        sentences = max(1, len(_SENTENCE_PATTERN.findall(block.content))) if words else 0
        return {
            "word_count": len(words),
            "sentence_count": sentences,
            "avg_sentence_length": round(len(words) / sentences, 2) if sentences else 0.0,
            "keywords": [word for word, _ in counts.most_common(self.max_keywords)],
        }


def _words(text: str) -> List[str]:
    return [word.lower() for word in _WORD_PATTERN.findall(text)]


def _is_keyword(word: str) -> bool:
    return len(word) > 3 and word not in _STOPWORDS and not word.isdigit()


__all__ = ["KeywordAnalyzer"]
