"""Generation service - the external image/text backend consumed by the executor."""
from .base import GenerationService
from .errors import classify_generation_error, QUOTA_MESSAGE
from .gemini import GeminiGenerationService, AnimationPrompts

__all__ = [
    "GenerationService",
    "classify_generation_error",
    "QUOTA_MESSAGE",
    "GeminiGenerationService",
    "AnimationPrompts",
]
