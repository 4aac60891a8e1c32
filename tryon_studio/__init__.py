"""Virtual try-on studio backed by a Gemini image model."""

__version__ = "1.0.0"
