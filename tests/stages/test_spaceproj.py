"""Tests for the .spaceproj descriptor parser."""

from __future__ import annotations

import textwrap

import pytest

from spacecompiler.errors import DescriptorError
from spacecompiler.stages import SpaceProjParser


def test_parser_builds_nested_forest() -> None:
    text = textwrap.dedent(
        """
        # Handbook descriptor
        Handbook
          [Introduction](docs/intro.md)
          Chapters
            [Setup](chapters\\setup.txt)
          [](notes.txt)
        Appendix
        """
    )

    graph = SpaceProjParser().parse(text)

    assert [root.name for root in graph.roots] == ["Handbook", "Appendix"]
    handbook = graph.roots[0]
    assert [child.name for child in handbook.children] == ["Introduction", "Chapters", "notes.txt"]
    assert handbook.file_path is None
    assert handbook.children[0].file_path == "docs/intro.md"
    assert handbook.children[1].children[0].file_path == "chapters/setup.txt"
    assert handbook.children[2].file_path == "notes.txt"
    assert graph.roots[1].children == []


def test_parser_returns_empty_graph_for_blank_descriptor() -> None:
    graph = SpaceProjParser().parse("\n# only a comment\n")

    assert graph.roots == []


def test_parser_rejects_inconsistent_dedent() -> None:
    text = "Root\n    Child\n  Stray\n"

    with pytest.raises(DescriptorError, match="line 3"):
        SpaceProjParser().parse(text)


def test_parser_rejects_root_shallower_than_first_root() -> None:
    with pytest.raises(DescriptorError):
        SpaceProjParser().parse("  Root\nOther\n")
