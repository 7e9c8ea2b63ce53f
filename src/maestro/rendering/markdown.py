"""Lightweight markdown-to-HTML conversion for collaborator responses.

The collaborator answers with a small subset of markdown. Only the pieces
the surfaces display are converted; everything else passes through
untouched. Each transform leaves text without its target markup unchanged,
so applying one twice is the same as applying it once.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence

__all__ = [
    "emphasis_to_html",
    "week_headings_to_html",
    "line_breaks_to_html",
    "render_chords",
    "render_exercises",
    "render_learning_path",
    "render_transcription",
    "render_assistant_message",
]

_BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
# occurrences already wrapped by a previous pass are skipped
_WEEK_PATTERN = re.compile(r"(?<!<h4>)Semana (\d+):")


def emphasis_to_html(text: str) -> str:
    return _BOLD_PATTERN.sub(r"<strong>\1</strong>", text)


def week_headings_to_html(text: str) -> str:
    return _WEEK_PATTERN.sub(r"<h4>Semana \1:</h4>", text)


def line_breaks_to_html(text: str) -> str:
    return text.replace("\n", "<br />")


def _pipeline(*steps: Callable[[str], str]) -> Callable[[str], str]:
    ordered: Sequence[Callable[[str], str]] = tuple(steps)

    def render(text: str) -> str:
        for step in ordered:
            text = step(text)
        return text

    return render


render_chords = _pipeline(emphasis_to_html)
render_exercises = _pipeline(emphasis_to_html)
render_transcription = _pipeline(emphasis_to_html)
render_learning_path = _pipeline(emphasis_to_html, week_headings_to_html)
render_assistant_message = _pipeline(emphasis_to_html, line_breaks_to_html)
