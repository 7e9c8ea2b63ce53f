"""Prepare chord-progression text for Spanish speech synthesis."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern

__all__ = ["CHORD_PRONUNCIATIONS", "SpeechUtterance", "chords_to_speech", "build_utterance"]


def _chord(symbol: str) -> Pattern[str]:
    # trailing digits stay attached: "Em7" reads "Mi menor7"
    return re.compile(rf"\b{re.escape(symbol)}(?![^\W\d_])")


def _letter(symbol: str) -> Pattern[str]:
    return re.compile(rf"\b{symbol}\b")


# Longest names first: "Am7" must be rewritten before "Am", and "Am"
# before the bare "A".
CHORD_PRONUNCIATIONS: tuple[tuple[Pattern[str], str], ...] = (
    (_chord("Am7"), "La menor séptima"),
    (_chord("Fmaj7"), "Fa mayor séptima"),
    (_chord("Dm7"), "Re menor séptima"),
    (_chord("Gsus4"), "Sol sus cuatro"),
    (_chord("Cmaj7"), "Do mayor séptima"),
    (_chord("G/B"), "Sol con bajo en Si"),
    (_chord("Am"), "La menor"),
    (_chord("Bm"), "Si menor"),
    (_chord("Cm"), "Do menor"),
    (_chord("Dm"), "Re menor"),
    (_chord("Em"), "Mi menor"),
    (_chord("Fm"), "Fa menor"),
    (_chord("Gm"), "Sol menor"),
    (_letter("C"), "Do"),
    (_letter("D"), "Re"),
    (_letter("E"), "Mi"),
    (_letter("F"), "Fa"),
    (_letter("G"), "Sol"),
    (_letter("A"), "La"),
    (_letter("B"), "Si"),
)

_SEPARATOR = re.compile(r"\s-\s")


@dataclass(frozen=True, slots=True)
class SpeechUtterance:
    """What the browser speech-synthesis call receives."""

    text: str
    lang: str = "es-ES"
    rate: float = 0.9


def chords_to_speech(text: str) -> str:
    """Rewrite chord symbols into their spoken Spanish names.

    Bold markers are dropped and ``" - "`` separators become commas so the
    synthesizer pauses between chords.
    """

    spoken = text.replace("**", "")
    spoken = _SEPARATOR.sub(", ", spoken)
    for pattern, replacement in CHORD_PRONUNCIATIONS:
        spoken = pattern.sub(replacement, spoken)
    return spoken


def build_utterance(text: str, *, lang: str = "es-ES", rate: float = 0.9) -> SpeechUtterance | None:
    """Return the utterance for ``text``, or ``None`` when nothing is left to say."""

    spoken = chords_to_speech(text or "")
    if not spoken.strip():
        return None
    return SpeechUtterance(text=spoken, lang=lang, rate=rate)
