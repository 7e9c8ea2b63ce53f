"""Post-processing of collaborator responses for display and speech."""

from .markdown import emphasis_to_html, line_breaks_to_html, week_headings_to_html
from .speech import SpeechUtterance, build_utterance, chords_to_speech

__all__ = [
    "emphasis_to_html",
    "line_breaks_to_html",
    "week_headings_to_html",
    "SpeechUtterance",
    "build_utterance",
    "chords_to_speech",
]
