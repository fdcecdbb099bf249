"""Capability interface shared by all extraction strategies."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..schema import VisualizationGraph, VisualizationKind


@runtime_checkable
class ConceptExtractor(Protocol):
    """Turns free text into a VisualizationGraph.

    Implementations must return an empty graph (no nodes, no edges) for empty
    or whitespace-only text instead of raising. ``variant`` is only honoured
    by the model-backed extractor; the algorithmic ones infer ``kind`` from
    the content.
    """

    id: str
    name: str

    async def extract(
        self,
        text: str,
        variant: Optional[VisualizationKind | str] = None,
    ) -> VisualizationGraph:
        ...


__all__ = ["ConceptExtractor"]
