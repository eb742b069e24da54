"""Statistical self-attention over every block of a compilation unit."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import List, Sequence, Tuple

from ..context import CompilationContext
from ..models import AttentionMatrix, BlockReference, ContentBlock, ParsedResource, SquareMatrix
from .constants import (
    ADJACENT_BOOST,
    ALGORITHM,
    MIN_TOKEN_LENGTH,
    NEARBY_BOOST,
    NEARBY_WINDOW,
    PREVIEW_LENGTH,
    PREVIEW_SUFFIX,
    SELF_RELEVANCE,
)
from .vectorizer import TfidfVectorizer, cosine_similarity, magnitude


@dataclass(frozen=True)
class AttentionParameters:
    """Tunable heuristics for coherence scoring.

    The boosts apply to pairs from the same resource: ``adjacent_boost`` when
    the order distance is exactly 1, ``nearby_boost`` when it is above 1 and at
    most ``nearby_window``.
    """

    adjacent_boost: float = ADJACENT_BOOST
    nearby_boost: float = NEARBY_BOOST
    nearby_window: int = NEARBY_WINDOW
    min_token_length: int = MIN_TOKEN_LENGTH
    preview_length: int = PREVIEW_LENGTH


_FlatBlock = Tuple[ParsedResource, ContentBlock]


class AttentionEngine:
    """Computes relevance scores and coherence probabilities between blocks.

    Every call recomputes vocabulary, IDF and both matrices from scratch; no
    state survives between calls.
    """

    def __init__(self, parameters: AttentionParameters | None = None) -> None:
        self.parameters = parameters or AttentionParameters()
        self.vectorizer = TfidfVectorizer(min_token_length=self.parameters.min_token_length)

    def compute(
        self,
        resources: Sequence[ParsedResource],
        context: CompilationContext | None = None,
    ) -> AttentionMatrix:
        context = context or CompilationContext()
        logger = context.logger
        logger.info("Computing self-attention matrix for %d resources", len(resources))

        flat = _flatten(resources)
        count = len(flat)
        if count == 0:
            logger.warning("No blocks found for attention computation")
            return AttentionMatrix(
                metadata={
                    "computed_at": _utc_now(),
                    "block_count": 0,
                    "resource_count": len(resources),
                    "vocabulary_size": 0,
                    "algorithm": ALGORITHM,
                }
            )

        logger.debug("Computing attention for %d blocks", count)
        stats, vectors = self.vectorizer.fit_transform(block.content for _, block in flat)
        norms = [magnitude(vector) for vector in vectors]

        relevance = SquareMatrix(count)
        for i in range(count):
            relevance.set(i, i, SELF_RELEVANCE)
            # Cosine similarity is symmetric, so fill both halves from one pass.
            for j in range(i + 1, count):
                similarity = cosine_similarity(
                    vectors[i], vectors[j], left_norm=norms[i], right_norm=norms[j]
                )
                relevance.set(i, j, similarity)
                relevance.set(j, i, similarity)

        scores = SquareMatrix(count)
        for i in range(count):
            scores.set_row(i, softmax(relevance.row(i)))

        coherence = SquareMatrix(count)
        for i in range(count):
            row = [
                min(1.0, scores.get(i, j) * self._flow_weight(flat[i], flat[j]))
                for j in range(count)
            ]
            coherence.set_row(i, normalize(row))

        logger.info("Self-attention computation completed for %d blocks", count)
        return AttentionMatrix(
            scores=scores,
            coherence=coherence,
            relevance=relevance,
            blocks=[self._reference(resource, block) for resource, block in flat],
            metadata={
                "computed_at": _utc_now(),
                "block_count": count,
                "resource_count": len(resources),
                "vocabulary_size": len(stats.document_frequency),
                "algorithm": ALGORITHM,
            },
        )

    def _flow_weight(self, left: _FlatBlock, right: _FlatBlock) -> float:
        """Adjacency multiplier times distance penalty for one ordered pair."""
        params = self.parameters
        same_resource = left[0].resource_id == right[0].resource_id
        distance = abs(left[1].order - right[1].order)

        weight = 1.0
        if same_resource and distance == 1:
            weight = params.adjacent_boost
        elif same_resource and 1 < distance <= params.nearby_window:
            weight = params.nearby_boost

        if distance > 0:
            weight *= 1.0 / (1.0 + math.log(1.0 + distance))
        return weight

    def _reference(self, resource: ParsedResource, block: ContentBlock) -> BlockReference:
        limit = self.parameters.preview_length
        content = block.content
        preview = content[:limit] + PREVIEW_SUFFIX if len(content) > limit else content
        return BlockReference(
            resource_id=resource.resource_id,
            block_order=block.order,
            block_type=block.type,
            content_preview=preview,
            content_length=len(content),
        )


def softmax(values: Sequence[float]) -> List[float]:
    """Numerically stable softmax; uniform when the exponentials vanish."""
    if not values:
        return []
    peak = max(values)
    exps = [math.exp(value - peak) for value in values]
    total = sum(exps)
    if total == 0.0:
        return [1.0 / len(values)] * len(values)
    return [value / total for value in exps]


def normalize(values: Sequence[float]) -> List[float]:
    """Scale a row to sum to 1.0; rows summing to zero are returned unchanged."""
    total = sum(values)
    if total > 0:
        return [value / total for value in values]
    return list(values)


def _flatten(resources: Sequence[ParsedResource]) -> List[_FlatBlock]:
    return [
        (resource, block)
        for resource in resources
        for block in sorted(resource.blocks, key=lambda item: item.order)
    ]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


__all__ = ["AttentionEngine", "AttentionParameters", "normalize", "softmax"]
