"""Tests for project graph resolution."""

from __future__ import annotations

from spacecompiler.context import CompilationContext
from spacecompiler.models import (
    CompilationResult,
    ContentBlock,
    GraphNode,
    ParsedResource,
    ProjectGraph,
)
from spacecompiler.resolver import ProjectGraphResolver, find_entry


class RecordingCompiler:
    """Unit compiler double returning one resource per call."""

    def __init__(self, *, fail_on: str | None = None) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail_on = fail_on

    def __call__(self, content: str, resource_id: str, context: CompilationContext) -> CompilationResult:
        self.calls.append((resource_id, content))
        if resource_id == self.fail_on:
            return CompilationResult(errors=[f"Error compiling {resource_id}: boom"])
        resource = ParsedResource(
            resource_id=resource_id,
            resource_type="text",
            blocks=[ContentBlock(content=content, type="paragraph", order=0)],
        )
        return CompilationResult(resources=[resource])


def _resolve(graph: ProjectGraph, files: dict[str, str], compiler: RecordingCompiler) -> CompilationResult:
    result = CompilationResult()
    ProjectGraphResolver(compiler).resolve(graph, files, result, CompilationContext())
    return result


def test_exact_match_attaches_parsed_content() -> None:
    node = GraphNode(name="Intro", file_path="docs/intro.md")
    compiler = RecordingCompiler()

    result = _resolve(ProjectGraph(roots=[node]), {"docs/intro.md": "Intro text"}, compiler)

    assert node.parsed_content is not None
    assert node.parsed_content.resource_id == "docs/intro.md"
    assert [resource.resource_id for resource in result.resources] == ["docs/intro.md"]
    assert result.warnings == []
    assert compiler.calls == [("docs/intro.md", "Intro text")]


def test_missing_file_leaves_node_unresolved_with_one_warning() -> None:
    node = GraphNode(name="Ghost", file_path="missing/ghost.md")

    result = _resolve(ProjectGraph(roots=[node]), {"docs/intro.md": "Intro"}, RecordingCompiler())

    assert node.parsed_content is None
    assert result.resources == []
    assert result.warnings == ["File not found in archive: missing/ghost.md"]


def test_suffix_match_is_case_insensitive() -> None:
    node = GraphNode(name="Setup", file_path="Setup.TXT")

    result = _resolve(
        ProjectGraph(roots=[node]),
        {"project/chapters/setup.txt": "Setup steps"},
        RecordingCompiler(),
    )

    assert node.parsed_content is not None
    assert result.resources[0].blocks[0].content == "Setup steps"


def test_children_are_visited_depth_first_even_when_parent_is_unresolved() -> None:
    leaf_a = GraphNode(name="A", file_path="a.txt")
    leaf_b = GraphNode(name="B", file_path="b.txt")
    group = GraphNode(name="Group", file_path="absent.txt", children=[leaf_a])
    graph = ProjectGraph(roots=[group, leaf_b])
    compiler = RecordingCompiler()

    result = _resolve(graph, {"a.txt": "alpha", "b.txt": "bravo"}, compiler)

    assert [call[0] for call in compiler.calls] == ["a.txt", "b.txt"]
    assert [resource.resource_id for resource in result.resources] == ["a.txt", "b.txt"]
    assert result.warnings == ["File not found in archive: absent.txt"]


def test_unit_errors_are_accumulated_and_traversal_continues() -> None:
    bad = GraphNode(name="Bad", file_path="bad.txt")
    good = GraphNode(name="Good", file_path="good.txt")
    compiler = RecordingCompiler(fail_on="bad.txt")

    result = _resolve(ProjectGraph(roots=[bad, good]), {"bad.txt": "x", "good.txt": "y"}, compiler)

    assert bad.parsed_content is None
    assert good.parsed_content is not None
    assert result.errors == ["Error compiling bad.txt: boom"]


def test_cyclic_graphs_are_visited_once() -> None:
    root = GraphNode(name="Loop", file_path="loop.txt")
    root.children.append(root)
    compiler = RecordingCompiler()

    result = _resolve(ProjectGraph(roots=[root]), {"loop.txt": "again"}, compiler)

    assert len(compiler.calls) == 1
    assert result.warnings == ["Skipping cyclic reference to loop.txt"]


def test_cycle_through_descendant_is_skipped_at_the_repeat() -> None:
    parent = GraphNode(name="Parent", file_path="parent.txt")
    child = GraphNode(name="Child", file_path="child.txt", children=[parent])
    parent.children.append(child)
    compiler = RecordingCompiler()

    result = _resolve(
        ProjectGraph(roots=[parent]), {"parent.txt": "p", "child.txt": "c"}, compiler
    )

    assert [call[0] for call in compiler.calls] == ["parent.txt", "child.txt"]
    assert result.warnings == ["Skipping cyclic reference to parent.txt"]


def test_shared_node_under_two_parents_is_not_a_cycle() -> None:
    shared = GraphNode(name="Shared", file_path="shared.txt")
    first = GraphNode(name="First", children=[shared])
    second = GraphNode(name="Second", children=[shared])
    compiler = RecordingCompiler()

    result = _resolve(ProjectGraph(roots=[first, second]), {"shared.txt": "common"}, compiler)

    assert [call[0] for call in compiler.calls] == ["shared.txt", "shared.txt"]
    assert result.warnings == []
    assert shared.parsed_content is not None


def test_find_entry_returns_first_entry_in_archive_order() -> None:
    files = {"archive/docs/intro.md": "nested", "docs/intro.md": "top"}

    assert find_entry(files, "docs/intro.md") == ("archive/docs/intro.md", "nested")
    assert find_entry(files, "intro.md") == ("archive/docs/intro.md", "nested")
    assert find_entry(files, "./DOCS\\Intro.md") == ("archive/docs/intro.md", "nested")
    reordered = {"docs/intro.md": "top", "archive/docs/intro.md": "nested"}
    assert find_entry(reordered, "docs/intro.md") == ("docs/intro.md", "top")
    assert find_entry(files, "other.md") is None
    assert find_entry(files, "") is None
