"""Sentence embeddings for the semantic extractor.

The embedding model is process-wide state: it is loaded on first use, in a
background thread, and kept for the rest of the process. Concurrent first
callers all await the same in-flight load instead of constructing the model
twice.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Protocol, Sequence, runtime_checkable

import numpy as np

from .lazy import LazyModel

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "all-MiniLM-L6-v2"


@runtime_checkable
class Embedder(Protocol):
    """Anything that can turn sentences into fixed-length vectors."""

    async def embed(self, sentences: Sequence[str]) -> list[list[float]]:
        ...


_SHARED_MODELS: dict[str, LazyModel[Any]] = {}
_SHARED_LOCK = threading.Lock()


def _load_sentence_transformer(model_name: str) -> Any:
    from sentence_transformers import SentenceTransformer

    return SentenceTransformer(model_name)


def shared_model(model_name: str = DEFAULT_MODEL_NAME) -> LazyModel[Any]:
    """Process-wide lazy handle for a sentence-transformers model."""
    with _SHARED_LOCK:
        if model_name not in _SHARED_MODELS:
            _SHARED_MODELS[model_name] = LazyModel(
                lambda: _load_sentence_transformer(model_name),
                name=f"sentence-transformers model {model_name}",
            )
        return _SHARED_MODELS[model_name]


class SentenceTransformerEmbedder:
    """Embedder backed by a shared sentence-transformers model."""

    def __init__(self, model_name: str = DEFAULT_MODEL_NAME, model: LazyModel[Any] | None = None) -> None:
        self.model_name = model_name
        self._model = model or shared_model(model_name)

    async def embed(self, sentences: Sequence[str]) -> list[list[float]]:
        model = await self._model.get()
        vectors = await asyncio.to_thread(
            model.encode, list(sentences), show_progress_bar=False, convert_to_numpy=True
        )
        return [vector.tolist() for vector in vectors]


def cosine_similarity_matrix(embeddings: Sequence[Sequence[float]]) -> np.ndarray:
    """Pairwise cosine similarity; zero vectors score 0 and the diagonal is 1."""
    matrix = np.asarray(embeddings, dtype=float)
    if matrix.size == 0:
        return np.zeros((len(embeddings), len(embeddings)))
    norms = np.linalg.norm(matrix, axis=1)
    denom = np.outer(norms, norms)
    dots = matrix @ matrix.T
    with np.errstate(divide="ignore", invalid="ignore"):
        similarity = np.where(denom == 0, 0.0, dots / denom)
    np.fill_diagonal(similarity, 1.0)
    return similarity


__all__ = [
    "DEFAULT_MODEL_NAME",
    "Embedder",
    "SentenceTransformerEmbedder",
    "cosine_similarity_matrix",
    "shared_model",
]
