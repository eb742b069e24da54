"""Conversion of compilation results into JSON-ready structures."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Set

from .models import (
    AttentionMatrix,
    BlockReference,
    CompilationResult,
    ContentBlock,
    GraphNode,
    ParsedResource,
    ProjectGraph,
)


def result_to_dict(result: CompilationResult) -> Dict[str, Any]:
    """Return the wire representation of a compilation result."""
    return {
        "success": result.success,
        "resources": [resource_to_dict(resource) for resource in result.resources],
        "attentionMatrix": matrix_to_dict(result.attention_matrix),
        "metadata": _jsonable(result.metadata),
        "errors": list(result.errors),
        "warnings": list(result.warnings),
    }


def resource_to_dict(resource: ParsedResource) -> Dict[str, Any]:
    return {
        "resourceId": resource.resource_id,
        "resourceType": resource.resource_type,
        "blocks": [_block_to_dict(block) for block in resource.blocks],
        "metadata": _jsonable(resource.metadata),
    }


def matrix_to_dict(matrix: Optional[AttentionMatrix]) -> Optional[Dict[str, Any]]:
    if matrix is None:
        return None
    return {
        "scores": matrix.scores.to_nested(),
        "coherence": matrix.coherence.to_nested(),
        "relevance": matrix.relevance.to_nested(),
        "blocks": [_reference_to_dict(reference) for reference in matrix.blocks],
        "metadata": _jsonable(matrix.metadata),
    }


def graph_to_dict(graph: ProjectGraph) -> Dict[str, Any]:
    """Serialize a project graph; a node that reappears under itself is marked as a cycle."""
    ancestors: Set[int] = set()
    return {
        "name": graph.name,
        "roots": [_node_to_dict(node, ancestors) for node in graph.roots],
    }


def _node_to_dict(node: GraphNode, ancestors: Set[int]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": node.name,
        "filePath": node.file_path,
        "resolved": node.parsed_content is not None,
        "resourceId": node.parsed_content.resource_id if node.parsed_content else None,
    }
    if id(node) in ancestors:
        payload["cycle"] = True
        payload["children"] = []
        return payload
    ancestors.add(id(node))
    payload["children"] = [_node_to_dict(child, ancestors) for child in node.children]
    ancestors.discard(id(node))
    return payload


def _block_to_dict(block: ContentBlock) -> Dict[str, Any]:
    return {
        "content": block.content,
        "type": block.type,
        "order": block.order,
        "fragmentCount": len(block.fragments),
        "annotations": _jsonable(block.annotations),
    }


def _reference_to_dict(reference: BlockReference) -> Dict[str, Any]:
    return {
        "resourceId": reference.resource_id,
        "blockOrder": reference.block_order,
        "blockType": reference.block_type,
        "contentPreview": reference.content_preview,
        "contentLength": reference.content_length,
    }


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        items: List[Any] = [_jsonable(item) for item in value]
        return items
    return value


__all__ = ["graph_to_dict", "matrix_to_dict", "resource_to_dict", "result_to_dict"]
