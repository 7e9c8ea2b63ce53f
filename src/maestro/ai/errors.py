"""Failure types raised by the text-generation client.

Only two kinds exist: the collaborator ran out of quota (rate limited) or
anything else went wrong (generic). Both carry the fixed Spanish message
shown to the user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, RateLimitError

__all__ = [
    "ErrorKind",
    "GenerationError",
    "RateLimitedError",
    "RATE_LIMIT_MESSAGE",
    "generic_failure_message",
    "translate_error",
]

RATE_LIMIT_MESSAGE = (
    "Has alcanzado el límite de solicitudes. Por favor, espera un momento antes de volver a intentarlo."
)
_RATE_LIMIT_MARKERS: tuple[str, ...] = ("429", "RESOURCE_EXHAUSTED")


class ErrorKind:
    """Constants for the failure categories surfaced to the user."""

    RATE_LIMITED = "rate_limited"
    GENERIC = "generic"


def generic_failure_message(context: str) -> str:
    """Return the apology shown when ``context`` (e.g. "generar los ejercicios") failed."""

    return f"Lo siento, no pude {context} en este momento. Por favor, inténtalo de nuevo."


@dataclass
class GenerationError(Exception):
    """The collaborator failed to produce a completion.

    Attributes:
        message: Diagnostic description, suitable for logs.
        details: Structured context (status code, exception type).
    """

    message: str
    details: dict[str, Any] = field(default_factory=dict)

    kind: ClassVar[str] = ErrorKind.GENERIC

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def user_message(self, context: str) -> str:
        return generic_failure_message(context)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"error": self.kind, "message": self.message}
        if self.details:
            result["details"] = dict(self.details)
        return result

    def __str__(self) -> str:
        return f"[{self.kind}] {self.message}"


@dataclass
class RateLimitedError(GenerationError):
    """The collaborator signalled quota or resource exhaustion."""

    kind: ClassVar[str] = ErrorKind.RATE_LIMITED

    def user_message(self, context: str) -> str:
        del context
        return RATE_LIMIT_MESSAGE


def translate_error(exc: BaseException) -> GenerationError:
    """Map an SDK/transport exception onto one of the two failure kinds."""

    if isinstance(exc, GenerationError):
        return exc
    details: dict[str, Any] = {"type": type(exc).__name__}
    status = getattr(exc, "status_code", None)
    if status is not None:
        details["status_code"] = status
    text = str(exc) or type(exc).__name__
    if isinstance(exc, RateLimitError) or status == 429 or _mentions_rate_limit(text):
        return RateLimitedError(text, details)
    if isinstance(exc, (APITimeoutError, httpx.TimeoutException)):
        return GenerationError(f"Request timed out: {text}", details)
    if isinstance(exc, APIConnectionError):
        return GenerationError(f"Connection error: {text}", details)
    if isinstance(exc, APIStatusError):
        return GenerationError(f"API error {status}: {text}", details)
    return GenerationError(text, details)


def _mentions_rate_limit(text: str) -> bool:
    return any(marker in text for marker in _RATE_LIMIT_MARKERS)
