"""Concept graph extraction delegated to a chat completions model."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import LLMConfig
from ..llm_client import ChatCompletionsClient
from ..parser import parse_visualization_response
from ..prompts import PromptBuilder
from ..schema import VisualizationGraph, VisualizationKind, empty_graph
from .registry import register_extractor

logger = logging.getLogger(__name__)


@register_extractor("llm")
class LLMExtractor:
    """Ask a model for the graph and validate whatever comes back.

    The system prompt is chosen by ``variant``; the reply goes through
    :func:`parse_visualization_response`, so a malformed answer surfaces as
    ``SchemaValidationError`` and a transport failure as ``LLMClientError``.
    """

    id = "llm"
    name = "LLM"

    def __init__(
        self,
        config: LLMConfig | None = None,
        client: ChatCompletionsClient | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.config = config or getattr(client, "config", None) or LLMConfig()
        self.client = client or ChatCompletionsClient(self.config)
        self.prompt_builder = prompt_builder or PromptBuilder()

    def update_config(self, config: LLMConfig) -> None:
        self.config = config
        self.client = ChatCompletionsClient(config)

    async def extract(
        self,
        text: str,
        variant: Optional[VisualizationKind | str] = None,
    ) -> VisualizationGraph:
        if not text.strip():
            return empty_graph("LLM Extraction")

        system_prompt = self.prompt_builder.build_system_prompt(variant)
        user_prompt = self.prompt_builder.build_user_prompt(text)

        raw = await self.client.complete(system_prompt, user_prompt)
        graph = parse_visualization_response(raw)
        logger.debug(
            "LLM: %d nodes, %d edges, kind=%s", len(graph.nodes), len(graph.edges), graph.kind
        )
        return graph


__all__ = ["LLMExtractor"]
