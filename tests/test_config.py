"""Tests for LLM configuration."""

import pytest

from concept_graph.config import LLMConfig


def test_defaults():
    config = LLMConfig()
    assert config.endpoint == "http://localhost:11434/v1"
    assert config.model == "llama3.2"
    assert config.timeout == 120
    assert config.api_key is None


def test_from_env_overrides():
    config = LLMConfig.from_env({
        "CONCEPT_GRAPH_LLM_ENDPOINT": "http://gpu-box:8000/v1",
        "CONCEPT_GRAPH_LLM_MODEL": "qwen2.5",
        "CONCEPT_GRAPH_LLM_TIMEOUT": "30",
        "CONCEPT_GRAPH_LLM_API_KEY": "secret",
    })
    assert config.endpoint == "http://gpu-box:8000/v1"
    assert config.model == "qwen2.5"
    assert config.timeout == 30
    assert config.api_key == "secret"


def test_from_env_ignores_blank_values():
    assert LLMConfig.from_env({"CONCEPT_GRAPH_LLM_MODEL": ""}) == LLMConfig()


def test_chat_completions_url_strips_trailing_slash():
    assert LLMConfig(endpoint="http://host/v1/").chat_completions_url == "http://host/v1/chat/completions"


@pytest.mark.parametrize("kwargs", [{"endpoint": ""}, {"model": ""}, {"timeout": 0}])
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        LLMConfig(**kwargs)
