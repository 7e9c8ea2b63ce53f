"""Tests for the generation surfaces."""

from __future__ import annotations

import pytest

from maestro.ai.errors import RATE_LIMIT_MESSAGE, RateLimitedError
from maestro.ai.prompts import ChordSelection, LibrarySelection
from maestro.music.vocabulary import Goal, Instrument, Key, Mood, SkillLevel, Style
from maestro.surfaces.flows import (
    ASSISTANT_GREETING,
    AssistantSurface,
    ChordSurface,
    ExerciseSurface,
    LearningPathSurface,
    LibrarySurface,
)
from maestro.surfaces.models import SurfaceStatus


@pytest.mark.asyncio
async def test_chord_surface_uses_current_selection(canned_generator) -> None:
    surface = ChordSurface(canned_generator)
    surface.select(key=Key.A_MINOR, style=Style.JAZZ, mood=Mood.MYSTERIOUS)

    task = surface.generate()
    assert task is not None
    await task

    prompt = canned_generator.prompts[0]
    assert "- Tonalidad: La menor" in prompt
    assert "- Estilo: Jazz" in prompt
    assert "- Emoción: Misterioso" in prompt
    assert surface.rendered() == "<strong>C - G - Am - F</strong>"


@pytest.mark.asyncio
async def test_chord_surface_speech(make_canned) -> None:
    surface = ChordSurface(make_canned("**Am7 - G/B - C**"))
    assert surface.speech() is None

    await surface.generate()
    utterance = surface.speech()

    assert utterance is not None
    assert utterance.text == "La menor séptima, Sol con bajo en Si, Do"
    assert utterance.lang == "es-ES"


@pytest.mark.asyncio
async def test_reset_restores_default_selection(canned_generator) -> None:
    surface = ChordSurface(canned_generator)
    surface.select(key=Key.E_MAJOR)
    await surface.generate()

    surface.reset()

    assert surface.selection == ChordSelection()
    assert surface.state.status is SurfaceStatus.IDLE
    assert surface.rendered() == ""


@pytest.mark.asyncio
async def test_exercise_surface_defaults(canned_generator) -> None:
    surface = ExerciseSurface(canned_generator)

    await surface.generate()

    prompt = canned_generator.prompts[0]
    assert "músico de Guitarra" in prompt
    assert '"Velocidad de los dedos"' in prompt


@pytest.mark.asyncio
async def test_learning_path_renders_week_headings(make_canned) -> None:
    generator = make_canned("Semana 1: **Escalas**\nSemana 2: Acordes")
    surface = LearningPathSurface(generator)
    surface.select(instrument=Instrument.VIOLIN, level=SkillLevel.ADVANCED, goal=Goal.SONGWRITING)

    await surface.generate()

    assert "músico de Violín de nivel Avanzado" in generator.prompts[0]
    assert surface.rendered() == (
        "<h4>Semana 1:</h4> <strong>Escalas</strong>\n<h4>Semana 2:</h4> Acordes"
    )


@pytest.mark.asyncio
async def test_learning_path_failure_state(make_canned) -> None:
    surface = LearningPathSurface(make_canned(error=RateLimitedError("quota")))

    await surface.generate()

    assert surface.state.status is SurfaceStatus.ERROR
    assert surface.state.error == RATE_LIMIT_MESSAGE
    assert surface.rendered() == ""


@pytest.mark.asyncio
async def test_library_requires_title_and_artist(canned_generator) -> None:
    surface = LibrarySurface(canned_generator)
    surface.select(song_title="Wonderwall", artist="   ")

    assert surface.generate() is None
    assert surface.state.status is SurfaceStatus.IDLE
    assert canned_generator.prompts == []


@pytest.mark.asyncio
async def test_library_generates_transcription(canned_generator) -> None:
    surface = LibrarySurface(canned_generator)
    surface.select(song_title=" Wonderwall ", artist="Oasis", level=SkillLevel.INTERMEDIATE)

    await surface.generate()

    assert 'canción "Wonderwall" de Oasis' in canned_generator.prompts[0]
    assert "nivel Intermedio" in canned_generator.prompts[0]
    assert surface.selection == LibrarySelection(" Wonderwall ", "Oasis", SkillLevel.INTERMEDIATE)


class TestAssistantSurface:
    def test_starts_with_greeting(self, canned_generator) -> None:
        surface = AssistantSurface(canned_generator)

        assert [message.text for message in surface.messages] == [ASSISTANT_GREETING]

    @pytest.mark.asyncio
    async def test_ask_appends_question_and_answer(self, make_canned) -> None:
        surface = AssistantSurface(make_canned("Una **escala** es..."))

        task = surface.ask("  ¿Qué es una escala?  ")
        assert task is not None
        await task

        assert [(m.sender, m.text) for m in surface.messages[1:]] == [
            ("user", "¿Qué es una escala?"),
            ("ai", "Una **escala** es..."),
        ]
        assert surface.rendered() == "Una <strong>escala</strong> es..."

    def test_blank_question_is_ignored(self, canned_generator) -> None:
        surface = AssistantSurface(canned_generator)

        assert surface.ask("   ") is None
        assert len(surface.messages) == 1

    @pytest.mark.asyncio
    async def test_question_while_loading_is_ignored(self, scripted_generator, settle) -> None:
        surface = AssistantSurface(scripted_generator)
        first = surface.ask("uno")

        assert surface.ask("dos") is None
        await settle()
        scripted_generator.resolve(0, "respuesta")
        await first

        assert [m.text for m in surface.messages[1:]] == ["uno", "respuesta"]

    @pytest.mark.asyncio
    async def test_error_is_appended_as_ai_message(self, make_canned) -> None:
        surface = AssistantSurface(make_canned(error=RuntimeError("offline")))

        await surface.ask("hola")

        last = surface.messages[-1]
        assert last.sender == "ai"
        assert last.is_error
        assert "responder tu pregunta" in last.text

    @pytest.mark.asyncio
    async def test_reset_drops_pending_answer(self, scripted_generator, settle) -> None:
        surface = AssistantSurface(scripted_generator)
        task = surface.ask("uno")
        await settle()

        surface.reset()
        scripted_generator.resolve(0, "tarde")
        await task

        assert [m.text for m in surface.messages] == [ASSISTANT_GREETING]
