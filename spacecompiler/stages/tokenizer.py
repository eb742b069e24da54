"""Default tokenizers for plain text and JSON content."""

from __future__ import annotations

import json
import re
from typing import Any, List

from ..models import Fragment
from .base import Tokenizer

_HEADING_PATTERN = re.compile(r"^\s{0,3}#{1,6}\s+\S")
_LIST_ITEM_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\S")
_BLANK_LINE_PATTERN = re.compile(r"\n\s*\n")


class TextTokenizer(Tokenizer):
    """Splits prose into heading, list item and paragraph fragments."""

    content_type = "text"

    def tokenize(self, content: str) -> List[Fragment]:
        fragments: List[Fragment] = []
        normalised = content.replace("\r\n", "\n").replace("\r", "\n")
        for chunk in _BLANK_LINE_PATTERN.split(normalised):
            paragraph: List[str] = []
            for line in chunk.split("\n"):
                if not line.strip():
                    continue
                if _HEADING_PATTERN.match(line) or _LIST_ITEM_PATTERN.match(line):
                    self._flush(paragraph, fragments)
                    kind = "heading" if _HEADING_PATTERN.match(line) else "list_item"
                    fragments.append(Fragment(content=line.strip(), kind=kind, index=len(fragments)))
                    continue
                paragraph.append(line.strip())
            self._flush(paragraph, fragments)
        return fragments

    @staticmethod
    def _flush(lines: List[str], fragments: List[Fragment]) -> None:
        if not lines:
            return
        fragments.append(Fragment(content=" ".join(lines), kind="paragraph", index=len(fragments)))
        lines.clear()


class JsonTokenizer(Tokenizer):
    """Emits one fragment per scalar leaf, labelled with its JSON pointer."""

    content_type = "json"

    def tokenize(self, content: str) -> List[Fragment]:
        if not content.strip():
            return []
        # Malformed JSON propagates; the orchestrator reports it for this file.
        document = json.loads(content)
        fragments: List[Fragment] = []
        self._walk(document, "", fragments)
        return fragments

    def _walk(self, value: Any, pointer: str, fragments: List[Fragment]) -> None:
        if isinstance(value, dict):
            for key, item in value.items():
                escaped = str(key).replace("~", "~0").replace("/", "~1")
                self._walk(item, f"{pointer}/{escaped}", fragments)
            return
        if isinstance(value, list):
            for position, item in enumerate(value):
                self._walk(item, f"{pointer}/{position}", fragments)
            return
        if value is None:
            return
        text = value if isinstance(value, str) else json.dumps(value)
        if not text.strip():
            return
        label = pointer or "/"
        fragments.append(
            Fragment(content=f"{label}: {text}", kind="field", index=len(fragments), path=label)
        )


__all__ = ["JsonTokenizer", "TextTokenizer"]
