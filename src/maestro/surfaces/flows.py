"""The five generation surfaces of the application.

Each surface owns its selections, one :class:`RequestCoordinator` and a
render function. Surfaces share nothing but the collaborator they call.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, ClassVar, Generic, TypeVar

from ..ai.client import TextGenerator
from ..ai.prompts import (
    AssistantQuestion,
    ChordSelection,
    ExerciseSelection,
    LearningPathSelection,
    LibrarySelection,
    build_prompt,
)
from ..rendering.markdown import (
    render_assistant_message,
    render_chords,
    render_exercises,
    render_learning_path,
    render_transcription,
)
from ..rendering.speech import SpeechUtterance, build_utterance
from .coordinator import RequestCoordinator
from .models import ChatMessage, SurfaceState, SurfaceStatus

LOGGER = logging.getLogger(__name__)

SelectionT = TypeVar("SelectionT")

ASSISTANT_GREETING = "¡Hola! Soy Asistente Musical. ¿En qué puedo ayudarte hoy?"


class Surface(Generic[SelectionT]):
    """Shared behaviour: select, generate, reset, render."""

    name: ClassVar[str] = "surface"
    failure_context: ClassVar[str] = "completar la solicitud"

    def __init__(self, generator: TextGenerator, *, model: str | None = None) -> None:
        self.selection: SelectionT = self.default_selection()
        self.coordinator: RequestCoordinator[SelectionT] = RequestCoordinator(
            self.name,
            generator,
            build_prompt,
            failure_context=self.failure_context,
            model=model,
        )

    def default_selection(self) -> SelectionT:
        raise NotImplementedError

    def render(self, text: str) -> str:
        return text

    @property
    def state(self) -> SurfaceState:
        return self.coordinator.state

    def select(self, **changes: Any) -> SelectionT:
        """Update selections; takes effect on the next :meth:`generate`."""

        self.selection = replace(self.selection, **changes)  # type: ignore[type-var]
        return self.selection

    def generate(self) -> asyncio.Task[None] | None:
        return self.coordinator.issue(self.selection)

    def reset(self) -> None:
        self.coordinator.reset()
        self.selection = self.default_selection()

    def rendered(self) -> str:
        state = self.state
        if state.status is not SurfaceStatus.SUCCESS:
            return ""
        return self.render(state.text)


class ChordSurface(Surface[ChordSelection]):
    name = "chords"
    failure_context = "generar la progresión de acordes"

    def default_selection(self) -> ChordSelection:
        return ChordSelection()

    def render(self, text: str) -> str:
        return render_chords(text)

    def speech(self) -> SpeechUtterance | None:
        """Utterance for the current progression, ``None`` if there is nothing to read."""

        state = self.state
        if state.status is not SurfaceStatus.SUCCESS:
            return None
        return build_utterance(state.text)


class ExerciseSurface(Surface[ExerciseSelection]):
    name = "exercises"
    failure_context = "generar los ejercicios"

    def default_selection(self) -> ExerciseSelection:
        return ExerciseSelection()

    def render(self, text: str) -> str:
        return render_exercises(text)


class LearningPathSurface(Surface[LearningPathSelection]):
    name = "learning_path"
    failure_context = "generar la ruta de aprendizaje"

    def default_selection(self) -> LearningPathSelection:
        return LearningPathSelection()

    def render(self, text: str) -> str:
        return render_learning_path(text)


class LibrarySurface(Surface[LibrarySelection]):
    name = "library"
    failure_context = "generar la transcripción"

    def default_selection(self) -> LibrarySelection:
        return LibrarySelection()

    def render(self, text: str) -> str:
        return render_transcription(text)

    def generate(self) -> asyncio.Task[None] | None:
        if not self.selection.is_complete:
            LOGGER.debug("library: song title and artist are required; not issuing")
            return None
        return super().generate()


class AssistantSurface(Surface[AssistantQuestion]):
    """Question/answer chat. The transcript lives only in memory."""

    name = "assistant"
    failure_context = "responder tu pregunta"

    def __init__(self, generator: TextGenerator, *, model: str | None = None) -> None:
        super().__init__(generator, model=model)
        self.messages: list[ChatMessage] = [ChatMessage("ai", ASSISTANT_GREETING)]
        self.coordinator.subscribe(self._on_state)

    def default_selection(self) -> AssistantQuestion:
        return AssistantQuestion("")

    def render(self, text: str) -> str:
        return render_assistant_message(text)

    def ask(self, question: str) -> asyncio.Task[None] | None:
        """Append ``question`` to the transcript and request an answer.

        Blank questions, and questions sent while an answer is pending, are
        ignored and return ``None``.
        """

        trimmed = (question or "").strip()
        if not trimmed or self.coordinator.is_loading:
            return None
        self.messages.append(ChatMessage("user", trimmed))
        self.selection = AssistantQuestion(trimmed)
        return self.generate()

    def reset(self) -> None:
        super().reset()
        self.messages = [ChatMessage("ai", ASSISTANT_GREETING)]

    def _on_state(self, state: SurfaceState) -> None:
        if state.status is SurfaceStatus.SUCCESS:
            self.messages.append(ChatMessage("ai", state.text))
        elif state.status is SurfaceStatus.ERROR:
            self.messages.append(ChatMessage("ai", state.error, is_error=True))


SURFACES: dict[str, Callable[..., Surface[Any]]] = {
    ChordSurface.name: ChordSurface,
    ExerciseSurface.name: ExerciseSurface,
    LearningPathSurface.name: LearningPathSurface,
    LibrarySurface.name: LibrarySurface,
    AssistantSurface.name: AssistantSurface,
}


__all__ = [
    "ASSISTANT_GREETING",
    "Surface",
    "ChordSurface",
    "ExerciseSurface",
    "LearningPathSurface",
    "LibrarySurface",
    "AssistantSurface",
    "SURFACES",
]
