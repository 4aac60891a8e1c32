"""History entry model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .image import EncodedImage


class HistoryEntry(BaseModel):
    """Immutable record of one completed try-on generation."""

    model_config = ConfigDict(frozen=True)

    person_image: EncodedImage
    garment_image: EncodedImage
    result_image: EncodedImage
    timestamp: datetime = Field(default_factory=datetime.now)
