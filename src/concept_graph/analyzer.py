"""Recommend a visualization kind from signal words in the text.

Each specific kind is scored by how many of its signal phrases occur, with
three or more hits counting as full confidence. ``graph`` is the general
fallback: it scores high when no specific kind stands out and never drops
below ``GRAPH_FLOOR``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from .schema import VisualizationKind

logger = logging.getLogger(__name__)

SATURATION_HITS = 3
GRAPH_FLOOR = 0.3

SIGNALS: dict[VisualizationKind, tuple[str, ...]] = {
    VisualizationKind.TREE: (
        "is a", "is an", "are a", "are an", "type of", "kind of", "subclass of",
        "subcategory of", "species of",
    ),
    VisualizationKind.FLOWCHART: (
        "first", "then", "next", "after", "finally", "subsequently", "step", "lastly",
        "second", "third", "before that", "followed by",
    ),
    VisualizationKind.HIERARCHY: (
        "contains", "includes", "consists of", "comprises", "is made of", "is part of",
        "composed of", "divided into",
    ),
    VisualizationKind.LOGICAL_FLOW: (
        "because", "therefore", "however", "consequently", "evidence", "suggests",
        "conclude", "premise", "thus", "hence", "although", "despite", "implies",
    ),
    VisualizationKind.STORYBOARD: (
        "scene", "meanwhile", "character", "conflict", "resolution", "chapter",
        "protagonist", "dialogue", "narrator", "plot", "story",
    ),
}


@dataclass(frozen=True)
class Recommendation:
    kind: VisualizationKind
    confidence: float


def signal_density(lower: str, signals: tuple[str, ...]) -> float:
    """Signal hits divided by ``SATURATION_HITS``, capped at 1. ``lower`` is already lowercased."""
    hits = sum(1 for signal in signals if signal in lower)
    return min(hits / SATURATION_HITS, 1.0)


def analyze_text(text: str) -> dict[VisualizationKind, float]:
    """Score every visualization kind between 0 and 1, ``graph`` first."""
    lower = text.lower()
    specific = {kind: signal_density(lower, signals) for kind, signals in SIGNALS.items()}
    scores = {VisualizationKind.GRAPH: max(GRAPH_FLOOR, 1 - max(specific.values()))}
    for kind in VisualizationKind:
        if kind in specific:
            scores[kind] = specific[kind]
    return scores


def top_recommendation(scores: Mapping[VisualizationKind, float]) -> Recommendation:
    """Highest-scoring kind; on a tie the earlier kind wins."""
    best = Recommendation(VisualizationKind.GRAPH, 0.0)
    for kind, score in scores.items():
        if score > best.confidence:
            best = Recommendation(VisualizationKind(kind), score)
    logger.debug("Recommended %s (%.2f)", best.kind.value, best.confidence)
    return best


def recommend_kind(text: str) -> Recommendation:
    return top_recommendation(analyze_text(text))


__all__ = [
    "Recommendation",
    "SIGNALS",
    "analyze_text",
    "recommend_kind",
    "signal_density",
    "top_recommendation",
]
