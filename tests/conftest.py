"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import pytest

_MAESTRO_ENV = (
    "MAESTRO_API_KEY",
    "MAESTRO_BASE_URL",
    "MAESTRO_MODEL",
    "MAESTRO_ORGANIZATION",
    "MAESTRO_SPEECH_LANG",
    "MAESTRO_SPEECH_RATE",
    "MAESTRO_DEBUG_LOGGING",
    "MAESTRO_REQUEST_TIMEOUT",
    "MAESTRO_SETTINGS_PATH",
    "MAESTRO_DEBUG",
    "GEMINI_API_KEY",
)


class ScriptedGenerator:
    """Generator whose calls stay pending until the test resolves them.

    Call ``n`` (zero-based, in arrival order) is completed with
    :meth:`resolve` or :meth:`fail`, in whatever order the test chooses.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str | None]] = []
        self._futures: list[asyncio.Future[str]] = []

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        self.calls.append((prompt, model))
        future: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self._futures.append(future)
        return await future

    def resolve(self, index: int, text: str) -> None:
        self._futures[index].set_result(text)

    def fail(self, index: int, error: BaseException) -> None:
        self._futures[index].set_exception(error)


class CannedGenerator:
    """Generator answering every prompt immediately with the same reply."""

    def __init__(self, reply: str = "**C - G - Am - F**", error: BaseException | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.closed = False

    async def generate(self, prompt: str, *, model: str | None = None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for name in _MAESTRO_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MAESTRO_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def scripted_generator() -> ScriptedGenerator:
    return ScriptedGenerator()


@pytest.fixture
def canned_generator() -> CannedGenerator:
    return CannedGenerator()


@pytest.fixture
def make_canned() -> Callable[..., CannedGenerator]:
    return CannedGenerator


@pytest.fixture
def settle() -> Callable[[], Awaitable[None]]:
    """Let scheduled tasks run until they block on their pending futures."""

    async def _settle() -> None:
        for _ in range(5):
            await asyncio.sleep(0)

    return _settle
