"""Concept graph extraction from sentence embeddings.

Each sentence is embedded and compared with every other by cosine
similarity. Candidate noun phrases come from a plain stopword heuristic;
two concepts are linked when they share a sentence or when some sentence
mentioning one is similar enough to some other sentence mentioning the
other. The similarity structure also decides the graph kind.
"""

from __future__ import annotations

import logging
import re
from itertools import combinations
from typing import Optional, Sequence

import numpy as np

from ..embeddings import Embedder, SentenceTransformerEmbedder, cosine_similarity_matrix
from ..schema import (
    Edge,
    GraphMetadata,
    Node,
    VisualizationGraph,
    VisualizationKind,
    empty_graph,
    summarize_relationships,
)
from ..text import fallback_label, pluralize, split_sentences, title_case
from .registry import register_extractor

logger = logging.getLogger(__name__)

MAX_NODES = 15
SIMILARITY_THRESHOLD = 0.5
HIGH_SIMILARITY = 0.7
HIGH_SIMILARITY_SHARE = 0.5
CHAIN_SIMILARITY = 0.5
CHAIN_SHARE = 0.7

STOPWORDS = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "and", "or",
    "but", "in", "on", "at", "to", "for", "of", "with", "by", "from", "it",
    "its", "this", "that",
})

_NON_WORD_CHARS = re.compile(r"[^a-zA-Z'-]")


def noun_phrases(sentence: str) -> list[str]:
    """Coarse candidate phrases: runs of cleaned words broken at stopwords."""
    phrases: list[str] = []
    current: list[str] = []
    for word in sentence.split():
        clean = _NON_WORD_CHARS.sub("", word).lower()
        if len(clean) < 2 or clean in STOPWORDS:
            if current:
                phrases.append(" ".join(current))
                current = []
        else:
            current.append(clean)
    if current:
        phrases.append(" ".join(current))
    return phrases


def detect_kind(similarity: np.ndarray) -> VisualizationKind:
    """Guess the graph kind from the sentence similarity matrix.

    Mostly near-duplicate sentences read as a hierarchy; a chain where each
    sentence resembles the next reads as a flowchart.
    """
    n = len(similarity)
    if n < 2:
        return VisualizationKind.GRAPH

    upper = similarity[np.triu_indices(n, k=1)]
    pair_count = upper.size
    high_count = int(np.count_nonzero(upper > HIGH_SIMILARITY))
    if high_count > pair_count * HIGH_SIMILARITY_SHARE:
        return VisualizationKind.HIERARCHY

    chain_score = int(np.count_nonzero(np.diagonal(similarity, offset=1) > CHAIN_SIMILARITY))
    if chain_score >= (n - 1) * CHAIN_SHARE:
        return VisualizationKind.FLOWCHART

    return VisualizationKind.GRAPH


def _max_cross_similarity(similarity: np.ndarray, first: set[int], second: set[int]) -> float:
    best = 0.0
    for a in first:
        for b in second:
            if a != b:
                best = max(best, float(similarity[a][b]))
    return best


@register_extractor("semantic")
class SemanticExtractor:
    """Embedding-similarity graph; the embedding model loads once per process."""

    id = "semantic"
    name = "Semantic (sentence embeddings)"

    def __init__(self, embedder: Embedder | None = None) -> None:
        self._embedder = embedder

    @property
    def embedder(self) -> Embedder:
        if self._embedder is None:
            self._embedder = SentenceTransformerEmbedder()
        return self._embedder

    async def extract(
        self,
        text: str,
        variant: Optional[VisualizationKind | str] = None,
    ) -> VisualizationGraph:
        if not text.strip():
            return empty_graph("Semantic Analysis")

        sentences = split_sentences(text)
        if sentences:
            similarity = cosine_similarity_matrix(await self.embedder.embed(sentences))
        else:
            similarity = np.zeros((0, 0))

        mentions: dict[str, set[int]] = {}
        for index, sentence in enumerate(sentences):
            for phrase in noun_phrases(sentence):
                mentions.setdefault(phrase, set()).add(index)

        ranked = sorted(mentions.items(), key=lambda item: len(item[1]), reverse=True)[:MAX_NODES]
        nodes = [
            Node(
                id=f"sem-{index}",
                label=title_case(phrase),
                details=f"Appears in {pluralize(len(indices), 'sentence')}",
            )
            for index, (phrase, indices) in enumerate(ranked)
        ]
        if not nodes:
            nodes = [Node(id="sem-0", label=fallback_label(text), details="No noun phrases found")]

        edges = self._link(ranked, similarity)
        kind = detect_kind(similarity)

        logger.debug(
            "Semantic: %d sentences, %d candidates, %d nodes, %d edges, kind=%s",
            len(sentences), len(mentions), len(nodes), len(edges), kind.value,
        )

        concepts = [node.label for node in nodes]
        return VisualizationGraph(
            kind=kind,
            title=", ".join(concepts[:3]) or "Semantic Analysis",
            description=f"Semantic analysis of {pluralize(len(sentences), 'sentence')}",
            nodes=nodes,
            edges=edges,
            metadata=GraphMetadata(concepts=concepts, relationships=summarize_relationships(nodes, edges)),
        )

    @staticmethod
    def _link(ranked: Sequence[tuple[str, set[int]]], similarity: np.ndarray) -> list[Edge]:
        edges = []
        for (i, (_, first)), (j, (_, second)) in combinations(enumerate(ranked), 2):
            co_occurs = not first.isdisjoint(second)
            best = _max_cross_similarity(similarity, first, second)
            if not co_occurs and best < SIMILARITY_THRESHOLD:
                continue
            edges.append(
                Edge(
                    source=f"sem-{i}",
                    target=f"sem-{j}",
                    label="co-occurs" if co_occurs else f"similarity: {best:.2f}",
                    type="relates",
                )
            )
        return edges


__all__ = ["SemanticExtractor", "STOPWORDS", "detect_kind", "noun_phrases"]
