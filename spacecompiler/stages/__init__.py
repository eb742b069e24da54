"""Pipeline stage implementations and tokenizer discovery."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, Mapping

from .analyzer import KeywordAnalyzer
from .base import DescriptorParser, SemanticAnalyzer, StructuralParser, Tokenizer
from .descriptor import SpaceProjParser
from .parser import BlockParser
from .tokenizer import JsonTokenizer, TextTokenizer

_ENTRY_POINT_GROUP = "spacecompiler.tokenizers"
_FALLBACK_CONTENT_TYPE = "text"

_BUILTIN_FACTORIES: dict[str, Callable[[], Tokenizer]] = {
    "text": TextTokenizer,
    "json": JsonTokenizer,
}


class TokenizerRegistry:
    """Maps content types to tokenizers; unknown types use the text tokenizer."""

    def __init__(self, tokenizers: Mapping[str, Tokenizer] | None = None) -> None:
        self._tokenizers: Dict[str, Tokenizer] = {}
        if tokenizers is None:
            tokenizers = discover_tokenizers()
        for content_type, tokenizer in tokenizers.items():
            self.register(content_type, tokenizer)
        if _FALLBACK_CONTENT_TYPE not in self._tokenizers:
            self.register(_FALLBACK_CONTENT_TYPE, TextTokenizer())

    def register(self, content_type: str, tokenizer: Tokenizer) -> None:
        if not isinstance(tokenizer, Tokenizer):
            raise TypeError(f"Tokenizer for '{content_type}' must subclass Tokenizer")
        self._tokenizers[content_type.lower()] = tokenizer

    def get(self, content_type: str) -> Tokenizer:
        return self._tokenizers.get(
            content_type.lower(), self._tokenizers[_FALLBACK_CONTENT_TYPE]
        )

    def content_types(self) -> Iterable[str]:
        return self._tokenizers.keys()


def discover_tokenizers() -> Dict[str, Tokenizer]:
    """Return built-in tokenizers plus any registered through entry points."""
    tokenizers: Dict[str, Tokenizer] = {
        name: factory() for name, factory in _BUILTIN_FACTORIES.items()
    }
    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - depends on installed plugins
            raise RuntimeError(f"Failed to load tokenizer entry point '{entry.name}': {exc}") from exc
        tokenizers[entry.name.lower()] = _coerce_tokenizer(loaded)
    return tokenizers


def _coerce_tokenizer(obj: object) -> Tokenizer:
    if isinstance(obj, Tokenizer):
        return obj
    if isinstance(obj, type) and issubclass(obj, Tokenizer):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Tokenizer):
            return instance
    raise TypeError("Tokenizer entry point must be a Tokenizer subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "BlockParser",
    "DescriptorParser",
    "JsonTokenizer",
    "KeywordAnalyzer",
    "SemanticAnalyzer",
    "SpaceProjParser",
    "StructuralParser",
    "TextTokenizer",
    "Tokenizer",
    "TokenizerRegistry",
    "discover_tokenizers",
]
