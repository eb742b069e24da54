"""Tests for keyword and readability annotations."""

from __future__ import annotations

from spacecompiler.models import ContentBlock, ParsedResource
from spacecompiler.stages import KeywordAnalyzer


def _resource() -> ParsedResource:
    return ParsedResource(
        resource_id="ml.txt",
        resource_type="text",
        blocks=[
            ContentBlock(
                content="Machine learning models learn patterns. Learning is fun!",
                type="paragraph",
                order=0,
            ),
            ContentBlock(content="", type="paragraph", order=1),
        ],
    )


def test_analyzer_annotates_blocks() -> None:
    resource = KeywordAnalyzer().analyze(_resource())

    annotations = resource.blocks[0].annotations
    assert annotations["word_count"] == 8
    assert annotations["sentence_count"] == 2
    assert annotations["avg_sentence_length"] == 4.0
    assert annotations["keywords"][0] == "learning"
    assert resource.blocks[1].annotations["word_count"] == 0
    assert resource.blocks[1].annotations["sentence_count"] == 0


def test_analyzer_preserves_block_order_content_and_count() -> None:
    original = _resource()
    expected = [(block.order, block.content) for block in original.blocks]

    analyzed = KeywordAnalyzer().analyze(original)

    assert [(block.order, block.content) for block in analyzed.blocks] == expected


def test_analyzer_summarises_resource() -> None:
    resource = KeywordAnalyzer(max_keywords=2).analyze(_resource())

    assert resource.metadata["block_count"] == 2
    assert resource.metadata["word_count"] == 8
    assert resource.metadata["keywords"][0] == "learning"
    assert len(resource.metadata["keywords"]) == 2
