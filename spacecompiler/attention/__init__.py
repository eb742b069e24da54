"""TF-IDF attention engine."""

from .engine import AttentionEngine, AttentionParameters
from .vectorizer import TermStatistics, TfidfVectorizer, cosine_similarity, tokenize

__all__ = [
    "AttentionEngine",
    "AttentionParameters",
    "TermStatistics",
    "TfidfVectorizer",
    "cosine_similarity",
    "tokenize",
]
