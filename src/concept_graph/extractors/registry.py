"""Registry for extraction engines.

Engine classes register themselves by id at import time; an
:class:`ExtractorRegistry` then holds one ready instance of each.

Usage:
    # Decorator-based registration
    @register_extractor("keywords")
    class KeywordExtractor:
        ...

    # Retrieval
    registry = ExtractorRegistry(LLMConfig.from_env())
    graph = await registry.get_engine("keywords").extract(text)
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from ..config import LLMConfig
from .base import ConceptExtractor

logger = logging.getLogger(__name__)

_EXTRACTOR_REGISTRY: dict[str, type] = {}

T = TypeVar("T", bound=type)


def register_extractor(engine_id: str) -> Callable[[T], T]:
    """Decorator to register an engine class under ``engine_id``.

    Registration order is the order engines are listed in.
    """
    def decorator(cls: T) -> T:
        _EXTRACTOR_REGISTRY[engine_id] = cls
        return cls
    return decorator


def available_engines() -> list[str]:
    """List all registered engine ids."""
    return list(_EXTRACTOR_REGISTRY.keys())


class ExtractorRegistry:
    """One instance per registered engine, sharing a single LLM configuration."""

    def __init__(self, llm_config: LLMConfig | None = None) -> None:
        self.llm_config = llm_config or LLMConfig()
        self._engines: dict[str, ConceptExtractor] = {}
        for engine_id, cls in _EXTRACTOR_REGISTRY.items():
            engine = cls()
            if hasattr(engine, "update_config"):
                engine.update_config(self.llm_config)
            self._engines[engine_id] = engine

    def get_engine(self, engine_id: str) -> ConceptExtractor:
        """Get an engine by id.

        Raises:
            ValueError: If no engine is registered under ``engine_id``.
        """
        if engine_id not in self._engines:
            available = ", ".join(self._engines)
            raise ValueError(f"Unknown extraction engine '{engine_id}'. Available: {available}")
        return self._engines[engine_id]

    def list_engines(self) -> list[ConceptExtractor]:
        return list(self._engines.values())

    def update_llm_config(self, config: LLMConfig) -> None:
        """Point every configurable engine at a new model server."""
        self.llm_config = config
        for engine in self._engines.values():
            if hasattr(engine, "update_config"):
                engine.update_config(config)
        logger.info("LLM engine now uses %s at %s", config.model, config.endpoint)


__all__ = ["ExtractorRegistry", "available_engines", "register_extractor"]
