"""Data models for the try-on studio."""

from .image import EncodedImage
from .history import HistoryEntry
from .wizard import WizardStage, GenerationStatus, SelectionSet, GarmentPool, WizardState
from .remote import (
    TextPart,
    ImagePart,
    GenerateContentRequest,
    GenerateContentResponse,
)

__all__ = [
    "EncodedImage",
    "HistoryEntry",
    "WizardStage",
    "GenerationStatus",
    "SelectionSet",
    "GarmentPool",
    "WizardState",
    "TextPart",
    "ImagePart",
    "GenerateContentRequest",
    "GenerateContentResponse",
]
