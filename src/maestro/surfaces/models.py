"""Surface state models.

A surface displays exactly one of four states. States are immutable; the
coordinator swaps in a new instance on every transition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

NO_REQUEST = 0
"""Token value meaning "no request is active"; never minted by ``issue``."""


def _utcnow() -> datetime:
    """Return current UTC time."""
    return datetime.now(timezone.utc)


class SurfaceStatus(Enum):
    """Status of a surface in its request lifecycle.

    Values:
        IDLE: Nothing requested, or the surface was reset.
        LOADING: A request is in flight for the current token.
        SUCCESS: The current token resolved with text.
        ERROR: The current token failed.
    """

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SurfaceState:
    """Displayed state of a surface.

    Attributes:
        status: Lifecycle status.
        text: Collaborator output, only set on success.
        error: User-facing message, only set on error.
        token: Token of the request that produced this state.
        updated_at: When the transition happened.
    """

    status: SurfaceStatus = SurfaceStatus.IDLE
    text: str = ""
    error: str = ""
    token: int = NO_REQUEST
    updated_at: datetime = field(default_factory=_utcnow, compare=False)

    @classmethod
    def idle(cls) -> "SurfaceState":
        return cls()

    @classmethod
    def loading(cls, token: int) -> "SurfaceState":
        return cls(status=SurfaceStatus.LOADING, token=token)

    @classmethod
    def success(cls, token: int, text: str) -> "SurfaceState":
        return cls(status=SurfaceStatus.SUCCESS, text=text, token=token)

    @classmethod
    def failure(cls, token: int, message: str) -> "SurfaceState":
        return cls(status=SurfaceStatus.ERROR, error=message, token=token)

    @property
    def is_loading(self) -> bool:
        return self.status is SurfaceStatus.LOADING

    @property
    def is_finished(self) -> bool:
        return self.status in (SurfaceStatus.SUCCESS, SurfaceStatus.ERROR)


ChatSender = Literal["user", "ai"]


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One entry of the assistant transcript."""

    sender: ChatSender
    text: str
    is_error: bool = False
    created_at: datetime = field(default_factory=_utcnow, compare=False)


__all__ = ["NO_REQUEST", "SurfaceStatus", "SurfaceState", "ChatMessage", "ChatSender"]
