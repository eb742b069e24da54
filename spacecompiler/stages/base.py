"""Contracts for the pipeline stages that feed the attention engine."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models import Fragment, ParsedResource, ProjectGraph


class Tokenizer(ABC):
    """Splits raw content into ordered fragments."""

    content_type: str = "text"

    @abstractmethod
    def tokenize(self, content: str) -> List[Fragment]:
        """Return fragments in document order; an empty list is a valid result."""


class StructuralParser(ABC):
    """Groups fragments into an ordered tree of content blocks."""

    @abstractmethod
    def parse(
        self, fragments: Sequence[Fragment], resource_id: str, content_type: str
    ) -> ParsedResource:
        """Build the parsed resource for one document."""


class SemanticAnalyzer(ABC):
    """Annotates parsed resources with statistics."""

    @abstractmethod
    def analyze(self, resource: ParsedResource) -> ParsedResource:
        """Return the annotated resource, keeping block order, content and count."""


class DescriptorParser(ABC):
    """Parses a project descriptor document into a project graph."""

    @abstractmethod
    def parse(self, text: str) -> ProjectGraph:
        """Return the forest of named references described by ``text``."""
