from __future__ import annotations

"""Parse and validate concept graphs returned by a language model.

Model output is untrusted: it may be wrapped in a markdown code fence, may not
be JSON at all, or may describe edges between nodes that do not exist. Every
problem is reported as a ``SchemaValidationError`` naming the offending field;
nothing is repaired or defaulted.
"""

import json
import re
from typing import Any

from pydantic import ValidationError

from .schema import VisualizationGraph, VisualizationKind

_CODE_FENCE = re.compile(r"```(?:[\w-]+)?\s*\n?([\s\S]*?)\n?\s*```")

VALID_KINDS = tuple(kind.value for kind in VisualizationKind)


class SchemaValidationError(ValueError):
    """Raised when a model response cannot be turned into a VisualizationGraph."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


def strip_code_fence(raw: str) -> str:
    """Return the interior of the first fenced block, or the trimmed input."""
    cleaned = raw.strip()
    match = _CODE_FENCE.search(cleaned)
    if match:
        cleaned = match.group(1).strip()
    return cleaned


def _is_nonempty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _check_required_fields(obj: dict[str, Any]) -> None:
    kind = obj.get("kind")
    if kind not in VALID_KINDS:
        if kind is None:
            raise SchemaValidationError("Missing visualization kind", field="kind")
        raise SchemaValidationError(f"Invalid visualization kind: {kind}", field="kind")
    if not _is_nonempty_string(obj.get("title")):
        raise SchemaValidationError("Missing or invalid title", field="title")
    if not _is_nonempty_string(obj.get("description")):
        raise SchemaValidationError("Missing or invalid description", field="description")
    nodes = obj.get("nodes")
    if not isinstance(nodes, list) or not nodes:
        raise SchemaValidationError("Missing or empty nodes array", field="nodes")
    if not isinstance(obj.get("edges"), list):
        raise SchemaValidationError("Missing edges array", field="edges")
    if not isinstance(obj.get("metadata"), dict):
        raise SchemaValidationError("Missing metadata object", field="metadata")


def _check_edge_references(obj: dict[str, Any]) -> None:
    node_ids = {
        node["id"] for node in obj["nodes"] if isinstance(node, dict) and isinstance(node.get("id"), str)
    }
    for index, edge in enumerate(obj["edges"]):
        if not isinstance(edge, dict):
            raise SchemaValidationError(f"Edge {index} is not an object", field=f"edges[{index}]")
        source = edge.get("source")
        if not isinstance(source, str) or source not in node_ids:
            raise SchemaValidationError(
                f"Edge references invalid source node: {source}",
                field=f"edges[{index}].source",
            )
        target = edge.get("target")
        if not isinstance(target, str) or target not in node_ids:
            raise SchemaValidationError(
                f"Edge references invalid target node: {target}",
                field=f"edges[{index}].target",
            )


def _location(error: dict[str, Any]) -> str:
    parts = []
    for part in error.get("loc", ()):
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            parts.append(f".{part}" if parts else str(part))
    return "".join(parts)


def parse_visualization_response(raw: str) -> VisualizationGraph:
    """Turn raw model text into a validated VisualizationGraph.

    Args:
        raw: Response content, optionally fenced in a ```json block

    Returns:
        The parsed graph

    Raises:
        SchemaValidationError: On malformed JSON, a missing or invalid field,
            or an edge pointing at a node id that does not exist
    """
    cleaned = strip_code_fence(raw)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise SchemaValidationError("LLM response is not valid JSON") from exc

    if not isinstance(parsed, dict):
        raise SchemaValidationError("LLM response is not a JSON object")

    _check_required_fields(parsed)
    _check_edge_references(parsed)

    # strict mode: no type coercion, "0.5" is not a weight
    try:
        return VisualizationGraph.model_validate_json(cleaned, strict=True)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = _location(first)
        raise SchemaValidationError(f"Invalid {location}: {first['msg']}", field=location) from exc


__all__ = [
    "SchemaValidationError",
    "VALID_KINDS",
    "parse_visualization_response",
    "strip_code_fence",
]
