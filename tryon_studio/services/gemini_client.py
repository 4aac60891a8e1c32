"""Gemini API client for garment and try-on image generation."""

import logging

import httpx
from pydantic import ValidationError

from ..config import GeminiConfig
from ..errors import RemoteCallError
from ..models.image import EncodedImage
from ..models.remote import (
    GenerateContentRequest,
    GenerateContentResponse,
    ImagePart,
    TextPart,
)
from ..prompts import TRY_ON_INSTRUCTION, build_garment_prompt


logger = logging.getLogger(__name__)


class GeminiImageClient:
    """Client for the `generateContent` endpoint of a Gemini image model.

    Holds no wizard state. Each call is a single request; nothing is retried.
    """

    def __init__(
        self,
        config: GeminiConfig,
        api_key: str | None = None,
        force_png_mime: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.api_key = api_key
        self.force_png_mime = force_png_mime
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"x-goog-api-key": self.api_key} if self.api_key else {}
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers=headers,
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    @property
    def model_path(self) -> str:
        return f"/models/{self.config.model}"

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def check_connection(self) -> bool:
        """Verify the model endpoint is reachable with the configured key."""
        try:
            response = await self.client.get(self.model_path)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def synthesize_garment(self, prompt_text: str) -> list[EncodedImage]:
        """Generate garment product shots from a free-text description.

        Returns:
            Every inline image of the first candidate, in response order.
            May be empty.
        """
        request = GenerateContentRequest.from_parts([
            TextPart(text=build_garment_prompt(prompt_text)),
        ])
        response = await self._generate(request)
        return response.inline_images()

    async def synthesize_try_on(
        self,
        person_image: EncodedImage,
        garment_image: EncodedImage,
    ) -> list[EncodedImage]:
        """Render the person wearing the garment.

        Args:
            person_image: Portrait, sent first
            garment_image: Clothing reference, sent second

        Returns:
            Every inline image of the first candidate, in response order.
            May be empty.
        """
        mime_override = "image/png" if self.force_png_mime else None
        request = GenerateContentRequest.from_parts([
            ImagePart.from_encoded(person_image, mime_override),
            ImagePart.from_encoded(garment_image, mime_override),
            TextPart(text=TRY_ON_INSTRUCTION),
        ])
        response = await self._generate(request)
        return response.inline_images()

    async def _generate(self, request: GenerateContentRequest) -> GenerateContentResponse:
        try:
            response = await self.client.post(
                f"{self.model_path}:generateContent",
                json=request.to_payload(),
            )
        except httpx.HTTPError as e:
            raise RemoteCallError(f"Request to {self.config.model} failed: {e}") from e

        if response.status_code != 200:
            raise RemoteCallError(
                f"{self.config.model} returned {response.status_code}: {response.text[:500]}",
                status_code=response.status_code,
            )

        try:
            result = GenerateContentResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RemoteCallError(f"Unreadable response from {self.config.model}: {e}") from e

        if result.prompt_feedback and result.prompt_feedback.block_reason:
            logger.warning("Prompt blocked by model: %s", result.prompt_feedback.block_reason)
        for text in result.texts():
            logger.debug("Model text: %s", text[:200])

        return result
