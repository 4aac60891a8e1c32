"""Try-on studio: one wizard session driven by user actions."""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..config import StudioConfig
from ..errors import ReadError
from ..models.events import (
    GarmentSelected,
    GarmentUploaded,
    HistoryRestored,
    NavigatedTo,
    PersonUploaded,
    Reset,
    RetryGarment,
    TryOnRequested,
)
from ..models.image import EncodedImage
from ..models.wizard import WizardStage, WizardState
from ..services import GeminiImageClient
from ..state import HistoryStore, WizardStore
from ..utils import image_codec
from .notifier import NoticeBoard, Notifier
from .orchestrator import GenerationOrchestrator, ImageGenerationClient


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultExport:
    """Downloadable copy of the current result image."""
    filename: str
    media_type: str
    content: bytes


class TryOnStudio:
    """Wizard session for virtual try-on.

    Flow:
    1. Upload a portrait (moves to the garment stage)
    2. Upload a garment or generate one from a description
    3. Confirm to render the try-on result
    4. Retry with another garment, or reset for a new person

    Every finished try-on is kept in `history` for the whole session.
    """

    def __init__(
        self,
        config: StudioConfig,
        client: ImageGenerationClient | None = None,
        notifier: Notifier | None = None,
    ):
        self.config = config

        # Initialize services
        self.client = client or GeminiImageClient(
            config=config.gemini,
            api_key=config.gemini_api_key,
            force_png_mime=config.force_png_mime,
        )
        self.notifier = notifier or NoticeBoard()

        # Initialize state
        self.store = WizardStore()
        self.history = HistoryStore()
        self.orchestrator = GenerationOrchestrator(
            client=self.client,
            store=self.store,
            history=self.history,
            notifier=self.notifier,
            messages=config.messages,
        )

    @property
    def state(self) -> WizardState:
        return self.store.state

    # Person stage

    def upload_person(self, image: EncodedImage) -> WizardState:
        return self.store.dispatch(PersonUploaded(image))

    async def upload_person_file(self, path: Path) -> WizardState:
        """Encode a local portrait; an unreadable file leaves the wizard as is."""
        try:
            image = await image_codec.encode(path)
        except ReadError as e:
            logger.error("Error reading file: %s", e)
            return self.state
        return self.upload_person(image)

    # Garment stage

    def upload_garment(self, image: EncodedImage) -> WizardState:
        return self.store.dispatch(GarmentUploaded(image))

    async def upload_garment_file(self, path: Path) -> WizardState:
        try:
            image = await image_codec.encode(path)
        except ReadError as e:
            logger.error("Error reading file: %s", e)
            return self.state
        return self.upload_garment(image)

    def select_garment(self, image: EncodedImage) -> WizardState:
        return self.store.dispatch(GarmentSelected(image))

    async def generate_garment(self, prompt_text: str) -> list[EncodedImage]:
        return await self.orchestrator.request_garment(prompt_text)

    async def confirm_garment(self) -> EncodedImage | None:
        """Move to the result stage and render the try-on.

        Does nothing unless the wizard is on the garment stage with both a
        person and a garment selected and no generation running.
        """
        before = self.state
        after = self.store.dispatch(TryOnRequested())
        if after.stage is before.stage:
            return None
        return await self.orchestrator.request_try_on()

    # Result stage

    def retry_garment(self) -> WizardState:
        return self.store.dispatch(RetryGarment())

    def reset(self) -> WizardState:
        return self.store.dispatch(Reset())

    def navigate(self, stage: WizardStage) -> WizardState:
        return self.store.dispatch(NavigatedTo(stage))

    def restore_history(self, index: int) -> WizardState:
        """Show the result of a past run. Raises IndexError for a bad index."""
        entry = self.history.get(index)
        return self.store.dispatch(HistoryRestored(self.history.restore(entry)))

    def export_result(self) -> ResultExport | None:
        image = self.state.selection.result_image
        if image is None:
            return None
        return ResultExport(
            filename=self.config.download_filename,
            media_type=image.mime_type,
            content=image_codec.decode(image),
        )

    def drain_notices(self) -> list[str]:
        if isinstance(self.notifier, NoticeBoard):
            return self.notifier.drain()
        return []

    async def aclose(self) -> None:
        close = getattr(self.client, "aclose", None)
        if close is not None:
            await close()
