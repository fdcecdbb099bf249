"""Text helpers shared by the algorithmic extractors."""

from __future__ import annotations

import hashlib
import re

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")
_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9\s'-]")

FALLBACK_LABEL_LIMIT = 60


def split_sentences(text: str) -> list[str]:
    """Split on runs of sentence-terminal punctuation, dropping empty segments."""
    return [segment.strip() for segment in _SENTENCE_BOUNDARY.split(text) if segment.strip()]


def tokenize(sentence: str) -> list[str]:
    """Lowercase alphanumeric words (apostrophes and hyphens kept) of length >= 2."""
    cleaned = _NON_TOKEN_CHARS.sub("", sentence.lower())
    return [word for word in cleaned.split() if len(word) > 1]


def title_case(phrase: str) -> str:
    """Capitalize the first letter of every word, leaving the rest untouched."""
    return " ".join(word[:1].upper() + word[1:] for word in phrase.split(" "))


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def fallback_label(text: str) -> str:
    """Label for the single node of a graph whose text yielded no concepts.

    The first sentence, or the trimmed text when there is none, shortened to
    ``FALLBACK_LABEL_LIMIT`` characters.
    """
    sentences = split_sentences(text)
    label = sentences[0] if sentences else " ".join(text.split())
    if len(label) <= FALLBACK_LABEL_LIMIT:
        return label
    return label[: FALLBACK_LABEL_LIMIT - 3].rstrip() + "..."


def content_fingerprint(text: str) -> str:
    """Short stable digest of the input, suitable as an external cache key."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest()[:12]


__all__ = [
    "split_sentences",
    "tokenize",
    "title_case",
    "pluralize",
    "content_fingerprint",
    "fallback_label",
]
