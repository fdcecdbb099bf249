"""Tests for the embedding-similarity extractor, driven by a fake embedder."""

import numpy as np
import pytest

from concept_graph.embeddings import cosine_similarity_matrix
from concept_graph.extractors import SemanticExtractor
from concept_graph.extractors.semantic import detect_kind, noun_phrases

from .fakes import FakeEmbedder


class TestCosineSimilarity:

    def test_identical_and_orthogonal(self):
        sim = cosine_similarity_matrix([[1.0, 0.0], [2.0, 0.0], [0.0, 3.0]])
        assert sim[0][1] == pytest.approx(1.0)
        assert sim[0][2] == pytest.approx(0.0)

    def test_zero_vector_scores_zero(self):
        sim = cosine_similarity_matrix([[0.0, 0.0], [1.0, 0.0]])
        assert sim[0][1] == 0.0
        assert sim[0][0] == 1.0


class TestDetectKind:

    def test_near_duplicates_form_a_hierarchy(self):
        assert detect_kind(np.ones((3, 3))) == "hierarchy"

    def test_chain_forms_a_flowchart(self):
        sim = cosine_similarity_matrix([[1.0, 0.0, 0.0], [0.8, 0.6, 0.0], [0.0, 1.0, 0.0]])
        assert detect_kind(sim) == "flowchart"

    def test_unrelated_sentences_form_a_graph(self):
        assert detect_kind(np.eye(3)) == "graph"

    def test_single_sentence(self):
        assert detect_kind(np.ones((1, 1))) == "graph"


def test_noun_phrases_break_at_stopwords():
    assert noun_phrases("The solar panels convert sunlight into power.") == [
        "solar panels convert sunlight into power"
    ]
    assert noun_phrases("Cats and dogs, in the garden.") == ["cats", "dogs", "garden"]


class TestSemanticExtractor:

    async def test_similar_sentences_are_linked(self):
        embedder = FakeEmbedder([[1.0, 0.0], [1.0, 0.0]])
        graph = await SemanticExtractor(embedder=embedder).extract(
            "Solar panels convert sunlight. Wind turbines generate power."
        )
        assert [node.label for node in graph.nodes] == [
            "Solar Panels Convert Sunlight",
            "Wind Turbines Generate Power",
        ]
        assert graph.nodes[0].details == "Appears in 1 sentence"
        assert [(e.source, e.target, e.label) for e in graph.edges] == [("sem-0", "sem-1", "similarity: 1.00")]
        assert graph.kind == "hierarchy"
        assert embedder.calls == [["Solar panels convert sunlight", "Wind turbines generate power"]]

    async def test_dissimilar_sentences_are_not_linked(self):
        embedder = FakeEmbedder([[1.0, 0.0], [0.0, 1.0]])
        graph = await SemanticExtractor(embedder=embedder).extract("Hot tea. Cold snow.")
        assert graph.edges == []
        assert graph.kind == "graph"

    async def test_shared_sentence_means_co_occurrence(self):
        embedder = FakeEmbedder([[1.0, 0.0]])
        graph = await SemanticExtractor(embedder=embedder).extract("Cats and dogs.")
        assert [(e.source, e.target, e.label) for e in graph.edges] == [("sem-0", "sem-1", "co-occurs")]
        assert graph.kind == "graph"

    async def test_ranked_by_sentence_count(self):
        embedder = FakeEmbedder([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        graph = await SemanticExtractor(embedder=embedder).extract(
            "Fire and oxygen. Fire and water. Fire and fuel."
        )
        assert graph.nodes[0].label == "Fire"
        assert graph.nodes[0].details == "Appears in 3 sentences"

    async def test_empty_input_skips_embedder(self):
        embedder = FakeEmbedder([])
        graph = await SemanticExtractor(embedder=embedder).extract("")
        assert graph.title == "Semantic Analysis"
        assert graph.nodes == []
        assert embedder.calls == []

    async def test_output_survives_parser(self):
        from concept_graph.parser import parse_visualization_response

        embedder = FakeEmbedder([[1.0, 0.0], [0.9, 0.1]])
        graph = await SemanticExtractor(embedder=embedder).extract("Bees pollinate flowers. Flowers feed bees.")
        assert parse_visualization_response(graph.to_json()) == graph

    async def test_punctuation_only_text_still_has_a_node(self):
        from concept_graph.parser import parse_visualization_response

        embedder = FakeEmbedder([])
        graph = await SemanticExtractor(embedder=embedder).extract("?!")
        assert [(node.id, node.label) for node in graph.nodes] == [("sem-0", "?!")]
        assert graph.kind == "graph"
        assert embedder.calls == []
        assert parse_visualization_response(graph.to_json()) == graph

    async def test_stopword_only_sentence_still_has_a_node(self):
        embedder = FakeEmbedder([[1.0, 0.0]])
        graph = await SemanticExtractor(embedder=embedder).extract("It is a.")
        assert [(node.id, node.details) for node in graph.nodes] == [("sem-0", "No noun phrases found")]
        assert graph.edges == []
