"""Concept graph extraction from shallow grammatical analysis.

Noun phrases become nodes, ranked by how often they are mentioned. Within a
sentence, consecutive retained nouns are linked and the edge is labelled with
the sentence's first verb. The graph kind is guessed from signal words.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from ..lazy import LazyModel
from ..schema import (
    Edge,
    GraphMetadata,
    Node,
    VisualizationGraph,
    VisualizationKind,
    empty_graph,
    summarize_relationships,
)
from ..text import fallback_label, pluralize
from .registry import register_extractor

logger = logging.getLogger(__name__)

MAX_NODES = 15
FALLBACK_VERB = "relates to"
DEFAULT_SPACY_MODEL = "en_core_web_sm"

SEQUENTIAL_SIGNALS = (
    "then", "next", "after", "finally", "first", "second", "third", "subsequently", "lastly",
)
CONTAINMENT_SIGNALS = (
    "includes", "contains", "consists of", "comprises", "is made of", "is part of",
)
IS_A_SIGNALS = (
    "is a", "is an", "are a", "are an", "type of", "kind of", "subclass of",
)
CROSS_SENTENCE_RATIO = 0.3


class LinguisticModelError(RuntimeError):
    """Raised when the spaCy pipeline cannot be loaded."""


@dataclass(frozen=True)
class TaggedSentence:
    text: str
    nouns: list[str] = field(default_factory=list)
    verbs: list[str] = field(default_factory=list)


@runtime_checkable
class Tagger(Protocol):
    """Sentence segmentation plus noun and verb phrases per sentence."""

    async def analyze(self, text: str) -> list[TaggedSentence]:
        ...


def _load_spacy(model_name: str) -> Any:
    import spacy

    try:
        return spacy.load(model_name)
    except OSError as exc:
        raise LinguisticModelError(
            f"spaCy model '{model_name}' is not installed. "
            f"Install it with: python -m spacy download {model_name}"
        ) from exc


_PIPELINES: dict[str, LazyModel[Any]] = {}

_LEADING_TOKENS_TO_DROP = {"DET", "PRON"}


class SpacyTagger:
    """Tagger backed by a spaCy pipeline, loaded once per process and model name."""

    def __init__(self, model_name: str = DEFAULT_SPACY_MODEL) -> None:
        self.model_name = model_name
        if model_name not in _PIPELINES:
            _PIPELINES[model_name] = LazyModel(
                lambda: _load_spacy(model_name), name=f"spaCy pipeline {model_name}"
            )
        self._pipeline = _PIPELINES[model_name]

    async def analyze(self, text: str) -> list[TaggedSentence]:
        nlp = await self._pipeline.get()
        return await asyncio.to_thread(self._tag, nlp, text)

    @staticmethod
    def _tag(nlp: Any, text: str) -> list[TaggedSentence]:
        doc = nlp(text)

        nouns_by_sentence: dict[int, list[str]] = {}
        for chunk in doc.noun_chunks:
            start = chunk.start
            # "the cat" -> "cat", "my dog" -> "dog"; bare pronouns vanish
            while start < chunk.end and doc[start].pos_ in _LEADING_TOKENS_TO_DROP:
                start += 1
            if start == chunk.end:
                continue
            nouns_by_sentence.setdefault(chunk.sent.start, []).append(doc[start:chunk.end].text)

        sentences = []
        for sent in doc.sents:
            if not sent.text.strip():
                continue
            verbs = [token.text for token in sent if token.pos_ in ("VERB", "AUX")]
            sentences.append(
                TaggedSentence(
                    text=sent.text.strip(),
                    nouns=nouns_by_sentence.get(sent.start, []),
                    verbs=verbs,
                )
            )
        return sentences


def detect_kind(text: str, cross_sentence_nodes: int, total_edges: int) -> VisualizationKind:
    """Guess the graph kind from signal words in the text."""
    lower = text.lower()

    if sum(1 for signal in SEQUENTIAL_SIGNALS if signal in lower) >= 2:
        return VisualizationKind.FLOWCHART
    if sum(1 for signal in CONTAINMENT_SIGNALS if signal in lower) >= 2:
        return VisualizationKind.HIERARCHY
    if sum(1 for signal in IS_A_SIGNALS if signal in lower) >= 2:
        return VisualizationKind.TREE

    # Well-connected text reads as a graph; so does everything else.
    if cross_sentence_nodes > 0 and cross_sentence_nodes >= total_edges * CROSS_SENTENCE_RATIO:
        return VisualizationKind.GRAPH
    return VisualizationKind.GRAPH


@dataclass
class _Mention:
    label: str
    count: int = 0
    sentences: set[int] = field(default_factory=set)


@register_extractor("nlp")
class LinguisticExtractor:
    """Noun/verb graph built from a Tagger (spaCy by default)."""

    id = "nlp"
    name = "NLP (spaCy)"

    def __init__(self, tagger: Tagger | None = None) -> None:
        self._tagger = tagger

    @property
    def tagger(self) -> Tagger:
        if self._tagger is None:
            self._tagger = SpacyTagger()
        return self._tagger

    async def extract(
        self,
        text: str,
        variant: Optional[VisualizationKind | str] = None,
    ) -> VisualizationGraph:
        if not text.strip():
            return empty_graph("NLP Analysis")

        tagged = await self.tagger.analyze(text)

        mentions: dict[str, _Mention] = {}
        for index, sentence in enumerate(tagged):
            for noun in sentence.nouns:
                key = noun.lower().strip()
                if len(key) < 2:
                    continue
                mention = mentions.setdefault(key, _Mention(label=noun.strip()))
                mention.count += 1
                mention.sentences.add(index)

        ranked = sorted(mentions.items(), key=lambda item: item[1].count, reverse=True)[:MAX_NODES]
        key_to_id = {key: f"nlp-{index}" for index, (key, _) in enumerate(ranked)}
        nodes = [
            Node(
                id=key_to_id[key],
                label=mention.label,
                details=f"Mentioned {mention.count} time(s)",
            )
            for key, mention in ranked
        ]
        if not nodes:
            nodes = [Node(id="nlp-0", label=fallback_label(text), details="No noun phrases found")]

        edges = self._link_sentences(tagged, key_to_id)

        cross_sentence_nodes = sum(1 for key in key_to_id if len(mentions[key].sentences) > 1)
        kind = detect_kind(text, cross_sentence_nodes, len(edges))

        logger.debug(
            "NLP: %d sentences, %d noun phrases, %d nodes, %d edges, kind=%s",
            len(tagged), len(mentions), len(nodes), len(edges), kind.value,
        )

        concepts = [node.label for node in nodes]
        return VisualizationGraph(
            kind=kind,
            title=", ".join(concepts[:3]) or "NLP Analysis",
            description=f"NLP analysis of {pluralize(len(tagged), 'sentence')}",
            nodes=nodes,
            edges=edges,
            metadata=GraphMetadata(concepts=concepts, relationships=summarize_relationships(nodes, edges)),
        )

    @staticmethod
    def _link_sentences(tagged: Sequence[TaggedSentence], key_to_id: dict[str, str]) -> list[Edge]:
        edges: list[Edge] = []
        seen: set[tuple[str, str]] = set()
        for sentence in tagged:
            ids = [key_to_id[key] for key in (noun.lower().strip() for noun in sentence.nouns) if key in key_to_id]
            label = sentence.verbs[0] if sentence.verbs else FALLBACK_VERB
            for source, target in zip(ids, ids[1:]):
                if source == target or (source, target) in seen:
                    continue
                seen.add((source, target))
                edges.append(Edge(source=source, target=target, label=label, type="relates"))
        return edges


__all__ = [
    "CONTAINMENT_SIGNALS",
    "IS_A_SIGNALS",
    "LinguisticExtractor",
    "LinguisticModelError",
    "SEQUENTIAL_SIGNALS",
    "SpacyTagger",
    "TaggedSentence",
    "Tagger",
    "detect_kind",
]
