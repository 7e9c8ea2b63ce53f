"""Generation client, prompt templates and failure types."""

from .client import ClientSettings, GenerationClient, TextGenerator
from .errors import GenerationError, RateLimitedError

__all__ = ["ClientSettings", "GenerationClient", "TextGenerator", "GenerationError", "RateLimitedError"]
