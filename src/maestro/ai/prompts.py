"""Prompt templates for each generation flow.

Every builder is a pure function of its selections: identical inputs always
yield the identical prompt string. Templates are Spanish because the
collaborator is instructed to answer in Spanish.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..music.vocabulary import WEAKNESS_OPTIONS, Goal, Instrument, Key, Mood, SkillLevel, Style

__all__ = [
    "ChordSelection",
    "ExerciseSelection",
    "LearningPathSelection",
    "LibrarySelection",
    "AssistantQuestion",
    "PromptInputs",
    "build_prompt",
    "chord_progression_prompt",
    "exercises_prompt",
    "learning_path_prompt",
    "song_transcription_prompt",
    "musical_answer_prompt",
]


def _label(value: Enum | str) -> str:
    # str-mixin enums format as "Key.C_MAJOR" on recent interpreters
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def chord_progression_prompt(key: Key, style: Style, mood: Mood) -> str:
    return (
        "Actúa como un experto en teoría musical y un talentoso compositor.\n"
        "Tu tarea es generar una progresión de acordes creativa y musicalmente coherente.\n"
        "Parámetros:\n"
        f"- Tonalidad: {_label(key)}\n"
        f"- Estilo: {_label(style)}\n"
        f"- Emoción: {_label(mood)}\n"
        "\n"
        "Instrucciones:\n"
        "1.  Genera una progresión de 4 a 8 acordes que se ajuste perfectamente a los parámetros dados.\n"
        "2.  Presenta la progresión de forma clara y en negrita. Ejemplo: **C - G - Am - F**.\n"
        "3.  Escribe una breve explicación (2-3 frases) de por qué esa progresión funciona para el estilo "
        "y la emoción solicitados, utilizando un lenguaje inspirador y fácil de entender.\n"
        "4.  La respuesta debe estar íntegramente en español."
    )


def exercises_prompt(instrument: Instrument, weakness: str) -> str:
    return (
        "Actúa como un asistente de práctica musical. Genera 3 ejercicios de calentamiento "
        f"personalizados para un músico de {_label(instrument)} que tiene dificultades con "
        f'"{_label(weakness)}". Los ejercicios deben describirse claramente en texto y en español. '
        "Cada ejercicio debe tener un título en negrita y una breve descripción de su propósito."
    )


def learning_path_prompt(instrument: Instrument, level: SkillLevel, goal: Goal) -> str:
    return (
        "Actúa como un tutor de música de IA. Crea un plan de aprendizaje personalizado de 4 semanas "
        f"para un músico de {_label(instrument)} de nivel {_label(level)} cuyo objetivo es "
        f'"{_label(goal)}". El plan debe estar estructurado semana a semana. Para cada semana, '
        "enumera 2-3 tareas específicas, incluyendo conceptos teóricos para estudiar, ejercicios "
        "técnicos para practicar y una pieza de repertorio para aprender. El tono debe ser "
        "motivador y claro, y la respuesta debe estar en español."
    )


def song_transcription_prompt(song_title: str, artist: str, level: SkillLevel) -> str:
    return (
        "Actúa como un útil asistente de músico. Genera una tabla de acordes simplificada para la "
        f'canción "{song_title}" de {artist}, adaptada para un músico de nivel {_label(level)}. '
        "La tabla debe ser fácil de leer. Incluye las secciones principales de la canción (por "
        "ejemplo, Verso, Coro, Puente). Si es posible, agrega un diagrama simple de rasgueo. "
        "La respuesta debe estar en español."
    )


def musical_answer_prompt(question: str) -> str:
    return (
        f'Un estudiante de música pregunta: "{question}".\n'
        "\n"
        "Actúa como un Asistente Musical de IA experto en música. Eres amigable, pedagógico y tus "
        "respuestas son claras y concisas. Tu especialidad es la teoría musical, incluyendo escalas, "
        "acordes, composición y ritmo. Responde a la pregunta del estudiante de manera que sea fácil "
        "de entender, utilizando analogías y ejemplos prácticos cuando sea posible. Si la pregunta es "
        "demasiado amplia, como 'háblame de los acordes', sugiere al usuario temas específicos sobre "
        "los que podría preguntar. Formatea tu respuesta con negritas para los términos importantes "
        "y listas para los conceptos clave, usando markdown. La respuesta debe estar íntegramente "
        "en español."
    )


@dataclass(frozen=True, slots=True)
class ChordSelection:
    key: Key = Key.C_MAJOR
    style: Style = Style.POP
    mood: Mood = Mood.HAPPY


@dataclass(frozen=True, slots=True)
class ExerciseSelection:
    instrument: Instrument = Instrument.GUITAR
    weakness: str = WEAKNESS_OPTIONS[0]


@dataclass(frozen=True, slots=True)
class LearningPathSelection:
    instrument: Instrument = Instrument.PIANO
    level: SkillLevel = SkillLevel.BEGINNER
    goal: Goal = Goal.IMPROVISATION


@dataclass(frozen=True, slots=True)
class LibrarySelection:
    song_title: str = ""
    artist: str = ""
    level: SkillLevel = SkillLevel.BEGINNER

    @property
    def is_complete(self) -> bool:
        return bool(self.song_title.strip() and self.artist.strip())


@dataclass(frozen=True, slots=True)
class AssistantQuestion:
    question: str


PromptInputs = Union[
    ChordSelection,
    ExerciseSelection,
    LearningPathSelection,
    LibrarySelection,
    AssistantQuestion,
]


def build_prompt(inputs: PromptInputs) -> str:
    """Dispatch ``inputs`` to the matching template."""

    if isinstance(inputs, ChordSelection):
        return chord_progression_prompt(inputs.key, inputs.style, inputs.mood)
    if isinstance(inputs, ExerciseSelection):
        return exercises_prompt(inputs.instrument, inputs.weakness)
    if isinstance(inputs, LearningPathSelection):
        return learning_path_prompt(inputs.instrument, inputs.level, inputs.goal)
    if isinstance(inputs, LibrarySelection):
        return song_transcription_prompt(inputs.song_title.strip(), inputs.artist.strip(), inputs.level)
    if isinstance(inputs, AssistantQuestion):
        return musical_answer_prompt(inputs.question.strip())
    raise TypeError(f"Unsupported prompt inputs: {type(inputs).__name__}")
