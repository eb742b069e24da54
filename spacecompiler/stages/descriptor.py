"""Parser for ``.spaceproj`` project descriptors.

A descriptor is an indented outline. Each non-blank line that does not start
with ``#`` becomes one node; deeper indentation nests a node under the closest
shallower line above it. ``[Name](path/to/file.md)`` declares a node that
references a file, anything else declares a grouping node::

    Handbook
      [Introduction](docs/intro.md)
      Chapters
        [Setup](chapters/setup.txt)
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..errors import DescriptorError
from ..models import GraphNode, ProjectGraph
from .base import DescriptorParser

_LINK_PATTERN = re.compile(r"^\[(?P<name>[^\]]*)\]\((?P<path>[^)]*)\)$")
_TAB_WIDTH = 4


class SpaceProjParser(DescriptorParser):
    """Builds a project graph from the link outline notation."""

    def parse(self, text: str) -> ProjectGraph:
        graph = ProjectGraph()
        stack: List[Tuple[int, GraphNode]] = []
        root_indent: Optional[int] = None

        for line_number, raw in enumerate(text.splitlines(), start=1):
            stripped = raw.strip()
            if not stripped or stripped.startswith("#"):
                continue
            indent = _indent_width(raw)
            node = _parse_node(stripped)

            dedented = False
            while stack and stack[-1][0] > indent:
                stack.pop()
                dedented = True
            if stack and stack[-1][0] == indent:
                stack.pop()
            elif dedented:
                raise DescriptorError(
                    f"Inconsistent indentation on line {line_number}: {stripped!r}"
                )

            if stack:
                stack[-1][1].children.append(node)
            else:
                if root_indent is None:
                    root_indent = indent
                elif indent != root_indent:
                    raise DescriptorError(
                        f"Inconsistent indentation on line {line_number}: {stripped!r}"
                    )
                graph.roots.append(node)
            stack.append((indent, node))

        return graph


def _parse_node(stripped: str) -> GraphNode:
    match = _LINK_PATTERN.match(stripped)
    if match is None:
        return GraphNode(name=stripped)
    path = match.group("path").strip().replace("\\", "/")
    name = match.group("name").strip() or path
    return GraphNode(name=name, file_path=path or None)


def _indent_width(line: str) -> int:
    width = 0
    for char in line:
        if char == " ":
            width += 1
        elif char == "\t":
            width += _TAB_WIDTH
        else:
            break
    return width


__all__ = ["SpaceProjParser"]
