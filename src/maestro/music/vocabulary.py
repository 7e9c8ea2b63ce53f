"""Enumerated option sets offered to the user.

Member values are the Spanish labels shown in the UI and embedded verbatim
in prompts.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

__all__ = [
    "Instrument",
    "SkillLevel",
    "Goal",
    "Key",
    "Style",
    "Mood",
    "WEAKNESS_OPTIONS",
    "major_keys",
    "minor_keys",
    "parse_choice",
]

E = TypeVar("E", bound=Enum)


class Instrument(str, Enum):
    GUITAR = "Guitarra"
    ELECTRIC_GUITAR = "Guitarra Eléctrica"
    ELECTRIC_BASS = "Bajo Eléctrico"
    PIANO = "Piano"
    VIOLIN = "Violín"
    VOICE = "Voz"
    DRUMS = "Batería"


class SkillLevel(str, Enum):
    BEGINNER = "Principiante"
    INTERMEDIATE = "Intermedio"
    ADVANCED = "Avanzado"


class Goal(str, Enum):
    IMPROVISATION = "Aprender a improvisar"
    AUDITION_PREP = "Preparar una audición"
    LEARN_THEORY = "Aprender teoría musical"
    SONGWRITING = "Componer canciones"
    TECHNICAL_SKILL = "Mejorar la técnica"


class Key(str, Enum):
    # major keys, circle-of-fifths order as listed in the selector
    C_MAJOR = "Do Mayor"
    G_MAJOR = "Sol Mayor"
    F_MAJOR = "Fa Mayor"
    D_MAJOR = "Re Mayor"
    BB_MAJOR = "Si bemol Mayor"
    A_MAJOR = "La Mayor"
    EB_MAJOR = "Mi bemol Mayor"
    E_MAJOR = "Mi Mayor"
    AB_MAJOR = "La bemol Mayor"
    B_MAJOR = "Si Mayor"
    DB_MAJOR = "Re bemol Mayor"
    F_SHARP_GB_MAJOR = "Fa sostenido / Sol bemol Mayor"
    # minor keys
    A_MINOR = "La menor"
    E_MINOR = "Mi menor"
    D_MINOR = "Re menor"
    B_MINOR = "Si menor"
    G_MINOR = "Sol menor"
    F_SHARP_MINOR = "Fa sostenido menor"
    C_MINOR = "Do menor"
    C_SHARP_MINOR = "Do sostenido menor"
    F_MINOR = "Fa menor"
    G_SHARP_MINOR = "Sol sostenido menor"
    BB_MINOR = "Si bemol menor"
    D_SHARP_EB_MINOR = "Re sostenido / Mi bemol menor"

    @property
    def is_major(self) -> bool:
        return "Mayor" in self.value


class Style(str, Enum):
    POP = "Pop"
    ROCK = "Rock"
    JAZZ = "Jazz"
    BLUES = "Blues"
    CLASSICAL = "Clásico"
    FOLK = "Folk"
    ELECTRONIC = "Electrónica"


class Mood(str, Enum):
    HAPPY = "Alegre"
    SAD = "Triste"
    EPIC = "Épico"
    RELAXED = "Relajado"
    ENERGETIC = "Enérgico"
    MYSTERIOUS = "Misterioso"


WEAKNESS_OPTIONS: tuple[str, ...] = (
    "Velocidad de los dedos",
    "Precisión rítmica",
    "Afinación",
    "Transiciones de acordes",
    "Control de la respiración (voz)",
    "Dinámicas (tocar suave/fuerte)",
)


def major_keys() -> list[Key]:
    return [key for key in Key if key.is_major]


def minor_keys() -> list[Key]:
    return [key for key in Key if not key.is_major]


def parse_choice(enum_cls: type[E], raw: str) -> E:
    """Resolve ``raw`` against member names or display values, ignoring case.

    ``"c_major"``, ``"C-MAJOR"`` and ``"do mayor"`` all resolve to
    ``Key.C_MAJOR``.

    Raises:
        ValueError: when nothing matches; the message lists valid values.
    """

    needle = (raw or "").strip().casefold()
    normalized_name = needle.replace("-", "_").replace(" ", "_")
    for member in enum_cls:
        if member.name.casefold() == normalized_name:
            return member
        if str(member.value).casefold() == needle:
            return member
    options = ", ".join(str(member.value) for member in enum_cls)
    raise ValueError(f"Unknown {enum_cls.__name__} '{raw}'. Valid options: {options}")
