"""Keyword graph extraction with RAKE (Rapid Automatic Keyword Extraction).

Candidate phrases are maximal runs of non-stopwords inside a sentence. Each
word gets a frequency (how many phrases contain it) and a degree (how many
other words it shares phrases with); a phrase scores the sum over its words
of ``(degree + frequency) / frequency``. The best phrases become nodes and
phrases sharing a sentence are linked.
"""

from __future__ import annotations

import logging
from collections import Counter
from itertools import combinations
from typing import Optional

from ..schema import (
    Edge,
    GraphMetadata,
    Node,
    VisualizationGraph,
    VisualizationKind,
    empty_graph,
    summarize_relationships,
)
from ..text import fallback_label, pluralize, split_sentences, title_case, tokenize
from .registry import register_extractor

logger = logging.getLogger(__name__)

MAX_NODES = 15

STOPWORDS = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "was", "are", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "shall", "can", "need", "dare",
    "ought", "used", "it", "its", "this", "that", "these", "those",
    "i", "me", "my", "we", "us", "our", "you", "your", "he", "him",
    "his", "she", "her", "they", "them", "their", "what", "which",
    "who", "whom", "how", "when", "where", "why", "not", "no", "nor",
    "if", "then", "else", "so", "as", "than", "too", "very", "just",
    "about", "above", "after", "again", "all", "also", "am", "any",
    "because", "before", "between", "both", "each", "few", "get",
    "got", "here", "into", "more", "most", "much", "must", "new",
    "now", "off", "old", "once", "only", "other", "over", "own",
    "same", "some", "still", "such", "take", "there", "through",
    "under", "up", "while", "come", "comes", "go", "goes", "make",
    "makes", "made",
})

Phrase = tuple[str, ...]


def candidate_phrases(words: list[str]) -> list[Phrase]:
    """Split a token sequence into maximal stopword-free runs."""
    phrases: list[Phrase] = []
    current: list[str] = []
    for word in words:
        if word in STOPWORDS:
            if current:
                phrases.append(tuple(current))
                current = []
        else:
            current.append(word)
    if current:
        phrases.append(tuple(current))
    return phrases


def score_phrases(sentences: list[list[str]]) -> dict[str, float]:
    """RAKE score per distinct phrase, keyed by the space-joined phrase.

    Keys are inserted in first-seen order so ties rank by appearance.
    """
    all_phrases = [phrase for words in sentences for phrase in candidate_phrases(words)]

    frequency: Counter[str] = Counter()
    degree: Counter[str] = Counter()
    for phrase in all_phrases:
        for word in phrase:
            frequency[word] += 1
            degree[word] += len(phrase) - 1

    scores: dict[str, float] = {}
    for phrase in all_phrases:
        key = " ".join(phrase)
        if key in scores:
            continue
        scores[key] = sum((degree[word] + frequency[word]) / frequency[word] for word in phrase)
    return scores


def count_cooccurrences(sentences: list[list[str]], retained: set[str]) -> dict[tuple[str, str], int]:
    """Count, per unordered pair of retained phrases, the sentences they share."""
    counts: dict[tuple[str, str], int] = {}
    for words in sentences:
        keys = [" ".join(phrase) for phrase in candidate_phrases(words)]
        keys = [key for key in keys if key in retained]
        for first, second in combinations(keys, 2):
            pair = tuple(sorted((first, second)))
            counts[pair] = counts.get(pair, 0) + 1
    return counts


@register_extractor("keywords")
class KeywordExtractor:
    """Statistical keyword graph; ``kind`` is always ``graph``."""

    id = "keywords"
    name = "Keywords (RAKE)"

    async def extract(
        self,
        text: str,
        variant: Optional[VisualizationKind | str] = None,
    ) -> VisualizationGraph:
        if not text.strip():
            return empty_graph("Keywords")

        sentences = split_sentences(text)

        tokenized = [tokenize(sentence) for sentence in sentences]
        scores = score_phrases(tokenized)
        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)[:MAX_NODES]

        phrase_to_id = {phrase: f"kw-{index}" for index, (phrase, _) in enumerate(ranked)}
        nodes = [
            Node(id=phrase_to_id[phrase], label=title_case(phrase), details=f"Score: {score:.1f}")
            for phrase, score in ranked
        ]
        if not nodes:
            # only stopwords: one node standing for the text itself
            nodes = [Node(id="kw-0", label=fallback_label(text), details="No keywords found")]

        edges = []
        for (first, second), count in count_cooccurrences(tokenized, set(phrase_to_id)).items():
            # a phrase repeated within one sentence is not a pair
            if first == second:
                continue
            edges.append(
                Edge(
                    source=phrase_to_id[first],
                    target=phrase_to_id[second],
                    label=f"co-occurs ({count})",
                    type="relates",
                )
            )

        logger.debug(
            "RAKE: %d sentences, %d candidate phrases, %d nodes, %d edges",
            len(sentences), len(scores), len(nodes), len(edges),
        )

        concepts = [node.label for node in nodes]
        return VisualizationGraph(
            kind=VisualizationKind.GRAPH,
            title=", ".join(concepts[:3]) or "Keywords",
            description=f"Keyword extraction from {pluralize(len(sentences), 'sentence')}",
            nodes=nodes,
            edges=edges,
            metadata=GraphMetadata(concepts=concepts, relationships=summarize_relationships(nodes, edges)),
        )


__all__ = [
    "KeywordExtractor",
    "STOPWORDS",
    "candidate_phrases",
    "count_cooccurrences",
    "score_phrases",
]
