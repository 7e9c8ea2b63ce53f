"""Maestro AI: music-practice content generated by a language model."""

__version__ = "0.1.0"
