"""Async text-generation client built around OpenAI-compatible endpoints."""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Protocol

import httpx
from openai import AsyncOpenAI, OpenAIError

from .errors import GenerationError, translate_error

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_MODEL = "gemini-2.5-flash"


class TextGenerator(Protocol):
    """Anything able to turn a prompt into one complete completion string."""

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        ...


@dataclass(slots=True)
class ClientSettings:
    """Subset of settings required to configure the generation client."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    organization: str | None = None
    request_timeout: float | None = 60.0
    default_headers: Mapping[str, str] | None = None
    debug_logging: bool = False


class GenerationClient:
    """Single-shot completion client.

    Each call sends one user message and waits for the full response. The
    SDK's own retry loop is disabled: a failed request surfaces immediately
    as :class:`~maestro.ai.errors.GenerationError`.
    """

    def __init__(self, settings: ClientSettings, *, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings
        self._client = client or self._build_client(settings)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        """Return the completion text for ``prompt``.

        Raises:
            GenerationError: on any transport, API or payload failure.
            RateLimitedError: when the endpoint reports quota exhaustion.
        """

        payload = self._build_payload(prompt, model=model)
        LOGGER.debug(
            "Requesting completion via %s (%d prompt chars)",
            payload["model"],
            len(prompt),
        )
        if self._settings.debug_logging:
            self._log_prompt_payload(payload)

        try:
            response = await self._client.chat.completions.create(**payload)
        except (OpenAIError, httpx.HTTPError) as exc:
            error = translate_error(exc)
            LOGGER.warning("Completion request failed: %s", error)
            raise error from exc

        text = self._extract_text(response)
        LOGGER.debug("Completion received: %d chars", len(text))
        return text

    def _build_client(self, settings: ClientSettings) -> AsyncOpenAI:
        headers = dict(settings.default_headers) if settings.default_headers else None
        return AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.base_url,
            organization=settings.organization,
            timeout=settings.request_timeout,
            max_retries=0,
            default_headers=headers,
        )

    def _build_payload(self, prompt: str, *, model: str | None) -> Dict[str, Any]:
        if not prompt or not prompt.strip():
            raise ValueError("prompt must be a non-empty string")
        return {
            "model": model or self._settings.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
        }

    @staticmethod
    def _extract_text(response: Any) -> str:
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            LOGGER.error("Completion response missing content: %r", response)
            raise GenerationError("Completion response missing content") from exc
        if not isinstance(content, str) or not content.strip():
            raise GenerationError("Completion response was empty")
        return content

    def _log_prompt_payload(self, payload: Mapping[str, Any]) -> None:
        try:
            serialized = json.dumps(payload, ensure_ascii=False, indent=2)
        except (TypeError, ValueError):
            LOGGER.debug("Completion payload (unserializable): %s", payload)
        else:
            LOGGER.debug("Completion payload:\n%s", serialized)

    async def aclose(self) -> None:
        """Close the underlying OpenAI client to release network resources."""

        close = getattr(self._client, "close", None)
        if close is None:
            return
        result = close()
        if inspect.isawaitable(result):
            await result


__all__ = ["ClientSettings", "GenerationClient", "TextGenerator", "DEFAULT_BASE_URL", "DEFAULT_MODEL"]
