"""Extraction engines for turning text into concept graphs.

Usage:
    from concept_graph.extractors import ExtractorRegistry

    registry = ExtractorRegistry()
    graph = await registry.get_engine("keywords").extract(text)
"""

from .base import ConceptExtractor
from .registry import ExtractorRegistry, available_engines, register_extractor

# Import engines to trigger registration, in listing order
from .keywords import KeywordExtractor
from .linguistic import LinguisticExtractor, LinguisticModelError, SpacyTagger, TaggedSentence, Tagger
from .semantic import SemanticExtractor
from .llm import LLMExtractor

__all__ = [
    # Contract
    "ConceptExtractor",
    # Registry
    "ExtractorRegistry",
    "available_engines",
    "register_extractor",
    # Engines
    "KeywordExtractor",
    "LinguisticExtractor",
    "SemanticExtractor",
    "LLMExtractor",
    # Collaborators
    "LinguisticModelError",
    "SpacyTagger",
    "TaggedSentence",
    "Tagger",
]
