"""Request coordinator: "latest issued request wins" for one surface.

Each surface owns one coordinator. Issuing a request mints a new token and
starts the collaborator call in the background; when the call resolves,
its outcome is applied only if its token is still the current one.
Superseded requests are not cancelled. They finish their round trip and
their result is dropped.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Callable, Generic, TypeVar

from ..ai.client import TextGenerator
from ..ai.errors import GenerationError, generic_failure_message
from .models import NO_REQUEST, SurfaceState

LOGGER = logging.getLogger(__name__)

InputsT = TypeVar("InputsT")
StateListener = Callable[[SurfaceState], None]


class RequestCoordinator(Generic[InputsT]):
    """Serializes user intent over unordered completions for one surface.

    Events Emitted (to subscribed listeners, in order of transition):
        - loading state when :meth:`issue` is called
        - success/error state when the *current* token resolves
        - idle state when :meth:`reset` is called
    """

    def __init__(
        self,
        name: str,
        generator: TextGenerator,
        prompt_builder: Callable[[InputsT], str],
        *,
        failure_context: str,
        model: str | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            name: Surface name used in logs and task names.
            generator: The collaborator that turns prompts into text.
            prompt_builder: Pure function mapping inputs to a prompt.
            failure_context: Phrase completing "no pude ..." in the
                generic failure message.
            model: Optional model override passed to the generator.
        """
        self._name = name
        self._generator = generator
        self._build_prompt = prompt_builder
        self._failure_context = failure_context
        self._model = model
        self._tokens = itertools.count(1)
        self._current_token = NO_REQUEST
        self._state = SurfaceState.idle()
        self._listeners: list[StateListener] = []
        self._pending: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def current_token(self) -> int:
        return self._current_token

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def pending_count(self) -> int:
        """Number of collaborator calls still in flight, stale ones included."""
        return len(self._pending)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def issue(self, inputs: InputsT) -> asyncio.Task[None]:
        """Start a request for ``inputs`` and return its background task.

        Must be called from within a running event loop. The caller is not
        blocked; awaiting the returned task is optional.
        """

        prompt = self._build_prompt(inputs)
        loop = asyncio.get_running_loop()
        token = next(self._tokens)
        self._current_token = token
        LOGGER.debug(
            "%s: issuing request token=%d prompt_length=%d", self._name, token, len(prompt)
        )
        self._transition(SurfaceState.loading(token))
        task = loop.create_task(self._run(token, prompt), name=f"{self._name}-request-{token}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def reset(self) -> None:
        """Return to idle; any in-flight resolution will be discarded."""

        if self._pending:
            LOGGER.debug(
                "%s: reset with %d request(s) still in flight", self._name, len(self._pending)
            )
        self._current_token = NO_REQUEST
        self._transition(SurfaceState.idle())

    async def wait_pending(self) -> None:
        """Wait for every in-flight call, including superseded ones."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for state transitions; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def _run(self, token: int, prompt: str) -> None:
        try:
            text = await self._generator.generate(prompt, model=self._model)
        except GenerationError as exc:
            LOGGER.warning("%s: request token=%d failed: %s", self._name, token, exc)
            outcome = SurfaceState.failure(token, exc.user_message(self._failure_context))
        except Exception:
            LOGGER.exception("%s: unexpected failure for request token=%d", self._name, token)
            outcome = SurfaceState.failure(token, generic_failure_message(self._failure_context))
        else:
            outcome = SurfaceState.success(token, text)
        self._resolve(outcome)

    def _resolve(self, outcome: SurfaceState) -> bool:
        if outcome.token != self._current_token:
            LOGGER.debug(
                "%s: discarding stale %s for token=%d (current=%d)",
                self._name,
                outcome.status.value,
                outcome.token,
                self._current_token,
            )
            return False
        self._transition(outcome)
        return True

    def _transition(self, state: SurfaceState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                LOGGER.exception("%s: state listener %r failed", self._name, listener)


__all__ = ["RequestCoordinator", "StateListener"]
