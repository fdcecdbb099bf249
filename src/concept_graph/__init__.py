"""Concept graph extraction from free text."""

from __future__ import annotations

from .analyzer import Recommendation, analyze_text, recommend_kind
from .config import LLMConfig
from .llm_client import LLMClientError
from .parser import SchemaValidationError, parse_visualization_response
from .schema import Edge, GraphMetadata, Node, VisualizationGraph, VisualizationKind
from .text import content_fingerprint

__version__ = "0.1.0"

__all__ = [
    "Edge",
    "ExtractorRegistry",
    "GraphMetadata",
    "LLMClientError",
    "LLMConfig",
    "Node",
    "Recommendation",
    "SchemaValidationError",
    "VisualizationGraph",
    "VisualizationKind",
    "analyze_text",
    "content_fingerprint",
    "parse_visualization_response",
    "recommend_kind",
]


def __getattr__(name: str):
    # Engines pull in numpy and the registry; load them on first use.
    if name == "ExtractorRegistry":
        from .extractors import ExtractorRegistry

        return ExtractorRegistry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
