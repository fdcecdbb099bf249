from __future__ import annotations

"""Configuration for the model-backed extractor."""

import os
from dataclasses import dataclass, replace
from typing import Mapping

ENV_PREFIX = "CONCEPT_GRAPH_LLM_"


@dataclass(frozen=True)
class LLMConfig:
    """Where and how to reach an OpenAI-compatible chat completions server."""

    endpoint: str = "http://localhost:11434/v1"
    model: str = "llama3.2"
    timeout: int = 120
    api_key: str | None = None
    temperature: float = 0.3

    def __post_init__(self) -> None:
        if not self.endpoint:
            msg = "LLM endpoint must not be empty"
            raise ValueError(msg)
        if not self.model:
            msg = "LLM model must not be empty"
            raise ValueError(msg)
        if self.timeout < 1:
            msg = "Timeout must be at least 1 second"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LLMConfig":
        """Build a config from ``CONCEPT_GRAPH_LLM_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        config = cls()
        overrides: dict[str, object] = {}
        if env.get(f"{ENV_PREFIX}ENDPOINT"):
            overrides["endpoint"] = env[f"{ENV_PREFIX}ENDPOINT"]
        if env.get(f"{ENV_PREFIX}MODEL"):
            overrides["model"] = env[f"{ENV_PREFIX}MODEL"]
        if env.get(f"{ENV_PREFIX}TIMEOUT"):
            overrides["timeout"] = int(env[f"{ENV_PREFIX}TIMEOUT"])
        if env.get(f"{ENV_PREFIX}API_KEY"):
            overrides["api_key"] = env[f"{ENV_PREFIX}API_KEY"]
        return replace(config, **overrides) if overrides else config

    @property
    def chat_completions_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/chat/completions"


__all__ = ["LLMConfig", "ENV_PREFIX"]
