"""Groups tokenizer fragments into ordered content blocks."""

from __future__ import annotations

from typing import List, Sequence

from ..models import ContentBlock, Fragment, ParsedResource
from .base import StructuralParser


class BlockParser(StructuralParser):
    """One block per heading, paragraph or field; runs of list items share a block."""

    def parse(
        self, fragments: Sequence[Fragment], resource_id: str, content_type: str
    ) -> ParsedResource:
        blocks: List[ContentBlock] = []
        for fragment in sorted(fragments, key=lambda item: item.index):
            previous = blocks[-1] if blocks else None
            if fragment.kind == "list_item" and previous is not None and previous.type == "list":
                previous.fragments.append(fragment)
                previous.content = f"{previous.content}\n{fragment.content}"
                continue
            block_type = "list" if fragment.kind == "list_item" else fragment.kind
            blocks.append(
                ContentBlock(
                    content=fragment.content,
                    type=block_type,
                    order=len(blocks),
                    fragments=[fragment],
                )
            )
        return ParsedResource(
            resource_id=resource_id,
            resource_type=content_type,
            blocks=blocks,
        )


__all__ = ["BlockParser"]
