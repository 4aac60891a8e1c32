"""Generation orchestrator: runs remote calls and folds results into state."""

import logging
from datetime import datetime
from typing import Callable, Protocol

from ..config import MessagesConfig
from ..errors import TryOnStudioError
from ..models.events import (
    GarmentGenerationFailed,
    GarmentsGenerated,
    GenerationFinished,
    GenerationStarted,
    TryOnCompleted,
    TryOnFailed,
)
from ..models.history import HistoryEntry
from ..models.image import EncodedImage
from ..prompts import is_blank
from ..state import HistoryStore, WizardStore
from .notifier import Notifier


logger = logging.getLogger(__name__)


class ImageGenerationClient(Protocol):
    async def synthesize_garment(self, prompt_text: str) -> list[EncodedImage]:
        ...

    async def synthesize_try_on(
        self,
        person_image: EncodedImage,
        garment_image: EncodedImage,
    ) -> list[EncodedImage]:
        ...


class GenerationOrchestrator:
    """Issues generation calls one at a time and applies their outcome.

    The in-flight flag in the wizard state gates both entry points: a request
    made while another is outstanding is dropped, not queued. The flag is
    cleared on every exit path. Failures notify the user and never escape.

    Completed calls are applied to whatever the state is when they return,
    even if the user navigated away in the meantime.
    """

    def __init__(
        self,
        client: ImageGenerationClient,
        store: WizardStore,
        history: HistoryStore,
        notifier: Notifier,
        messages: MessagesConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.client = client
        self.store = store
        self.history = history
        self.notifier = notifier
        self.messages = messages or MessagesConfig()
        self.clock = clock

    @property
    def busy(self) -> bool:
        return self.store.state.in_flight

    async def request_garment(self, prompt_text: str) -> list[EncodedImage]:
        """Generate garment candidates from a text description.

        Returns:
            The images added to the pool, newest last. Empty on any failure.
        """
        if is_blank(prompt_text):
            return []
        if self.busy:
            logger.info("Garment request dropped: generation already in flight")
            return []

        self.store.dispatch(GenerationStarted())
        try:
            logger.info("Generating garment: %s", prompt_text[:80])
            images = await self.client.synthesize_garment(prompt_text)
            if not images:
                self._fail(GarmentGenerationFailed(self.messages.garment_empty))
                return []

            self.store.dispatch(GarmentsGenerated(tuple(images)))
            logger.info("Garment generation produced %d image(s)", len(images))
            return list(images)

        except TryOnStudioError as e:
            logger.error("Garment generation failed: %s", e)
            self._fail(GarmentGenerationFailed(self.messages.garment_failed))
            return []

        except Exception:
            logger.exception("Unexpected error during garment generation")
            self._fail(GarmentGenerationFailed(self.messages.garment_failed))
            return []

        finally:
            self.store.dispatch(GenerationFinished())

    async def request_try_on(self) -> EncodedImage | None:
        """Render the selected person wearing the selected garment.

        Returns:
            The new result image, or None if nothing was produced.
        """
        selection = self.store.state.selection
        person_image = selection.person_image
        garment_image = selection.garment_image
        if person_image is None or garment_image is None:
            return None
        if self.busy:
            logger.info("Try-on request dropped: generation already in flight")
            return None

        self.store.dispatch(GenerationStarted())
        try:
            logger.info("Generating try-on result")
            images = await self.client.synthesize_try_on(person_image, garment_image)
            if not images:
                self._fail(TryOnFailed(self.messages.try_on_empty))
                return None

            # Several images in one response: the last one is kept.
            result_image = images[-1]
            self.store.dispatch(TryOnCompleted(result_image))
            self.history.append(HistoryEntry(
                person_image=person_image,
                garment_image=garment_image,
                result_image=result_image,
                timestamp=self.clock(),
            ))
            logger.info("Try-on complete; history now has %d entries", len(self.history))
            return result_image

        except TryOnStudioError as e:
            logger.error("Try-on generation failed: %s", e)
            self._fail(TryOnFailed(self.messages.try_on_failed))
            return None

        except Exception:
            logger.exception("Unexpected error during try-on generation")
            self._fail(TryOnFailed(self.messages.try_on_failed))
            return None

        finally:
            self.store.dispatch(GenerationFinished())

    def _fail(self, event: GarmentGenerationFailed | TryOnFailed) -> None:
        self.store.dispatch(event)
        self.notifier.notify(event.message)
