"""Wizard state models."""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .image import EncodedImage


class WizardStage(str, Enum):
    """Active phase of the wizard."""
    PERSON = "person"
    GARMENT = "garment"
    RESULT = "result"


class GenerationStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class SelectionSet(BaseModel):
    """Currently selected person, garment and result images."""

    model_config = ConfigDict(frozen=True)

    person_image: EncodedImage | None = None
    garment_image: EncodedImage | None = None
    result_image: EncodedImage | None = None


class GarmentPool(BaseModel):
    """Garment images available for selection."""

    model_config = ConfigDict(frozen=True)

    generated: tuple[EncodedImage, ...] = ()  # most recent first
    uploaded: EncodedImage | None = None

    def contains(self, image: EncodedImage) -> bool:
        return image == self.uploaded or image in self.generated

    def with_generated(self, images: Iterable[EncodedImage]) -> "GarmentPool":
        """Prepend each image in turn, so the last one ends up first."""
        generated = self.generated
        for image in images:
            generated = (image, *generated)
        return self.model_copy(update={"generated": generated})

    @computed_field
    @property
    def candidates(self) -> tuple[EncodedImage, ...]:
        """Display order: an upload not already generated, then generations."""
        if self.uploaded is not None and self.uploaded not in self.generated:
            return (self.uploaded, *self.generated)
        return self.generated


class WizardState(BaseModel):
    """Snapshot of everything the wizard shows."""

    model_config = ConfigDict(frozen=True)

    stage: WizardStage = WizardStage.PERSON
    selection: SelectionSet = Field(default_factory=SelectionSet)
    pool: GarmentPool = Field(default_factory=GarmentPool)
    status: GenerationStatus = GenerationStatus.IDLE
    last_failure: str | None = None

    @property
    def in_flight(self) -> bool:
        return self.status is GenerationStatus.IN_FLIGHT

    @property
    def can_try_on(self) -> bool:
        return (
            self.selection.person_image is not None
            and self.selection.garment_image is not None
        )
