from __future__ import annotations

"""HTTP client for an OpenAI-compatible chat completions server."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .config import LLMConfig

logger = logging.getLogger(__name__)


class LLMClientError(RuntimeError):
    """Raised when the model server fails or returns no usable content."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass
class ChatCompletionsClient:
    """Issue one JSON-mode chat completion request per call.

    ``requests`` is blocking, so the call runs in a worker thread and the
    coroutine suspends until the response arrives. No retries are attempted.
    """

    config: LLMConfig

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        return await asyncio.to_thread(self._post, system_prompt, user_prompt)

    def build_payload(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        return {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.config.temperature,
            "response_format": {"type": "json_object"},
        }

    def _post(self, system_prompt: str, user_prompt: str) -> str:
        endpoint = self.config.chat_completions_url
        logger.info("Requesting %s from %s", self.config.model, endpoint)
        try:
            response = requests.post(
                endpoint,
                json=self.build_payload(system_prompt, user_prompt),
                timeout=self.config.timeout,
                headers=self._headers(),
            )
        except requests.RequestException as exc:
            raise LLMClientError(f"Failed to reach LLM server at {endpoint}: {exc}") from exc

        if not response.ok:
            raise LLMClientError(
                f"LLM request failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise LLMClientError(
                "LLM server returned a non-JSON body",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        content = self._extract_content(body)
        if not content:
            raise LLMClientError("LLM returned empty response", status_code=response.status_code)
        return content

    @staticmethod
    def _extract_content(body: Any) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        choices = body.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            return None
        content = message.get("content")
        return content if isinstance(content, str) else None

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers


__all__ = ["ChatCompletionsClient", "LLMClientError"]
