"""External service clients."""

from .gemini_client import GeminiImageClient

__all__ = ["GeminiImageClient"]
