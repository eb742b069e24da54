"""Core data models shared across spacecompiler components."""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence


@dataclass
class Fragment:
    """Ordered piece of raw content emitted by a tokenizer."""

    content: str
    kind: str
    index: int
    path: Optional[str] = None


@dataclass
class ContentBlock:
    """One node of a parsed resource; the unit attention is computed over."""

    content: str
    type: str = "block"
    order: int = 0
    fragments: List[Fragment] = field(default_factory=list)
    annotations: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ParsedResource:
    """Ordered block tree for a single input document."""

    resource_id: str
    resource_type: str
    blocks: List[ContentBlock] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BlockReference:
    """Denormalized view of the block behind one matrix index."""

    resource_id: str
    block_order: int
    block_type: str
    content_preview: str
    content_length: int


class SquareMatrix:
    """Row-major N x N buffer of floats indexed by ``i * N + j``."""

    __slots__ = ("size", "_values")

    def __init__(self, size: int, values: Sequence[float] | None = None) -> None:
        if size < 0:
            raise ValueError("matrix size must be non-negative")
        self.size = size
        if values is None:
            self._values = array("d", bytes(8 * size * size))
        else:
            if len(values) != size * size:
                raise ValueError(
                    f"expected {size * size} values for a {size}x{size} matrix, got {len(values)}"
                )
            self._values = array("d", values)

    def get(self, i: int, j: int) -> float:
        return self._values[self._offset(i, j)]

    def set(self, i: int, j: int, value: float) -> None:
        self._values[self._offset(i, j)] = value

    def row(self, i: int) -> List[float]:
        if not 0 <= i < self.size:
            raise IndexError(f"row {i} out of range for size {self.size}")
        start = i * self.size
        return list(self._values[start : start + self.size])

    def set_row(self, i: int, values: Sequence[float]) -> None:
        if len(values) != self.size:
            raise ValueError("row length does not match matrix size")
        start = i * self.size
        self._values[start : start + self.size] = array("d", values)

    def rows(self) -> Iterator[List[float]]:
        for i in range(self.size):
            yield self.row(i)

    def to_nested(self) -> List[List[float]]:
        return list(self.rows())

    def _offset(self, i: int, j: int) -> int:
        if not (0 <= i < self.size and 0 <= j < self.size):
            raise IndexError(f"index ({i}, {j}) out of range for size {self.size}")
        return i * self.size + j

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SquareMatrix):
            return NotImplemented
        return self.size == other.size and self._values == other._values

    def __repr__(self) -> str:
        return f"SquareMatrix(size={self.size})"


@dataclass
class AttentionMatrix:
    """Pairwise relevance and coherence surface over every block in a compilation unit.

    ``blocks[k]`` describes index ``k`` of all three matrices. Blocks are
    flattened resource-major in input order, then by position inside each
    resource.
    """

    scores: SquareMatrix = field(default_factory=lambda: SquareMatrix(0))
    coherence: SquareMatrix = field(default_factory=lambda: SquareMatrix(0))
    relevance: SquareMatrix = field(default_factory=lambda: SquareMatrix(0))
    blocks: List[BlockReference] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return self.scores.size

    def score(self, i: int, j: int) -> float:
        return self.scores.get(i, j)

    def coherence_at(self, i: int, j: int) -> float:
        return self.coherence.get(i, j)

    def relevance_at(self, i: int, j: int) -> float:
        return self.relevance.get(i, j)

    def score_row(self, i: int) -> List[float]:
        return self.scores.row(i)

    def coherence_row(self, i: int) -> List[float]:
        return self.coherence.row(i)


@dataclass(eq=False)
class GraphNode:
    """Named reference in a project descriptor, optionally pointing at a file."""

    name: str
    file_path: Optional[str] = None
    children: List["GraphNode"] = field(default_factory=list)
    parsed_content: Optional[ParsedResource] = None


@dataclass
class ProjectGraph:
    """Forest of graph nodes parsed from a project descriptor."""

    roots: List[GraphNode] = field(default_factory=list)
    name: Optional[str] = None


@dataclass
class CompilationResult:
    """Outcome of one compilation call; errors and warnings are the only failure channel."""

    resources: List[ParsedResource] = field(default_factory=list)
    attention_matrix: Optional[AttentionMatrix] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def merge(self, other: "CompilationResult") -> None:
        """Append resources, errors and warnings from a partial result."""
        self.resources.extend(other.resources)
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
