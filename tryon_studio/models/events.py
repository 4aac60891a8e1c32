"""Events consumed by the wizard state machine."""

from dataclasses import dataclass

from .image import EncodedImage
from .wizard import WizardStage


@dataclass(frozen=True)
class PersonUploaded:
    image: EncodedImage


@dataclass(frozen=True)
class GarmentUploaded:
    image: EncodedImage


@dataclass(frozen=True)
class GarmentSelected:
    image: EncodedImage


@dataclass(frozen=True)
class GarmentsGenerated:
    images: tuple[EncodedImage, ...] = ()


@dataclass(frozen=True)
class GarmentGenerationFailed:
    message: str


@dataclass(frozen=True)
class NavigatedTo:
    stage: WizardStage


@dataclass(frozen=True)
class TryOnRequested:
    """User confirmed the garment; moves to the result stage."""


@dataclass(frozen=True)
class TryOnCompleted:
    image: EncodedImage


@dataclass(frozen=True)
class TryOnFailed:
    message: str


@dataclass(frozen=True)
class RetryGarment:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class HistoryRestored:
    image: EncodedImage


@dataclass(frozen=True)
class GenerationStarted:
    pass


@dataclass(frozen=True)
class GenerationFinished:
    pass


WizardEvent = (
    PersonUploaded
    | GarmentUploaded
    | GarmentSelected
    | GarmentsGenerated
    | GarmentGenerationFailed
    | NavigatedTo
    | TryOnRequested
    | TryOnCompleted
    | TryOnFailed
    | RetryGarment
    | Reset
    | HistoryRestored
    | GenerationStarted
    | GenerationFinished
)
