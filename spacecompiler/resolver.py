"""Resolution of project graph nodes against extracted archive entries."""

from __future__ import annotations

from typing import Callable, Mapping, Optional, Set, Tuple

from .context import CompilationContext
from .models import CompilationResult, GraphNode, ProjectGraph

UnitCompiler = Callable[[str, str, CompilationContext], CompilationResult]


class ProjectGraphResolver:
    """Walks a project graph depth-first, compiling every referenced file.

    ``compile_unit`` receives ``(content, resource_id, context)`` and returns a
    partial result holding at most one resource; it must not compute attention.
    """

    def __init__(self, compile_unit: UnitCompiler) -> None:
        self._compile_unit = compile_unit

    def resolve(
        self,
        graph: ProjectGraph,
        files: Mapping[str, str],
        result: CompilationResult,
        context: CompilationContext,
    ) -> None:
        ancestors: Set[int] = set()
        for root in graph.roots:
            self._visit(root, files, result, context, ancestors)

    def _visit(
        self,
        node: GraphNode,
        files: Mapping[str, str],
        result: CompilationResult,
        context: CompilationContext,
        ancestors: Set[int],
    ) -> None:
        if id(node) in ancestors:
            label = node.file_path or node.name
            context.logger.warning("Skipping cyclic reference to %s", label)
            result.warnings.append(f"Skipping cyclic reference to {label}")
            return
        context.checkpoint(f"graph node {node.name!r}")

        if node.file_path:
            match = find_entry(files, node.file_path)
            if match is None:
                context.logger.warning("File not found in archive: %s", node.file_path)
                result.warnings.append(f"File not found in archive: {node.file_path}")
            else:
                entry_name, content = match
                context.logger.info(
                    "Compiling graph node file %s (archive entry %s)", node.file_path, entry_name
                )
                unit_result = self._compile_unit(content, node.file_path, context)
                if unit_result.resources:
                    node.parsed_content = unit_result.resources[0]
                result.merge(unit_result)

        ancestors.add(id(node))
        try:
            for child in node.children:
                self._visit(child, files, result, context, ancestors)
        finally:
            ancestors.discard(id(node))


def find_entry(files: Mapping[str, str], file_path: str) -> Optional[Tuple[str, str]]:
    """Return the first entry, in archive order, equal to or ending with ``file_path``.

    Both comparisons ignore case and treat backslashes as forward slashes.
    """
    wanted = _normalise(file_path)
    if not wanted:
        return None
    for name, content in files.items():
        candidate = _normalise(name)
        if candidate == wanted or candidate.endswith(wanted):
            return name, content
    return None


def _normalise(path: str) -> str:
    normalised = path.replace("\\", "/").strip().lower()
    while normalised.startswith("./"):
        normalised = normalised[2:]
    return normalised


__all__ = ["ProjectGraphResolver", "UnitCompiler", "find_entry"]
