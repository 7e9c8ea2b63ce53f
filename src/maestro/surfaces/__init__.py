"""Independently owned UI surfaces and their request coordination."""

from .coordinator import RequestCoordinator
from .flows import (
    SURFACES,
    AssistantSurface,
    ChordSurface,
    ExerciseSurface,
    LearningPathSurface,
    LibrarySurface,
    Surface,
)
from .models import NO_REQUEST, ChatMessage, SurfaceState, SurfaceStatus

__all__ = [
    "RequestCoordinator",
    "SURFACES",
    "Surface",
    "AssistantSurface",
    "ChordSurface",
    "ExerciseSurface",
    "LearningPathSurface",
    "LibrarySurface",
    "NO_REQUEST",
    "ChatMessage",
    "SurfaceState",
    "SurfaceStatus",
]
