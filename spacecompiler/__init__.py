"""Document compiler with a statistical cross-document attention surface."""

from .attention import AttentionEngine, AttentionParameters
from .context import CompilationContext
from .models import (
    AttentionMatrix,
    BlockReference,
    CompilationResult,
    ContentBlock,
    GraphNode,
    ParsedResource,
    ProjectGraph,
)
from .orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = [
    "AttentionEngine",
    "AttentionMatrix",
    "AttentionParameters",
    "BlockReference",
    "CompilationContext",
    "CompilationResult",
    "ContentBlock",
    "GraphNode",
    "Orchestrator",
    "ParsedResource",
    "ProjectGraph",
]
