"""Wire models for the remote `generateContent` call.

A response part is either text or inline image data. Parts are parsed into
a tagged variant so decoding is a plain filter over typed values.
"""

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel

from .image import EncodedImage


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class InlineData(_WireModel):
    mime_type: str = "image/png"
    data: str  # base64


class TextPart(_WireModel):
    text: str = ""


class ImagePart(_WireModel):
    inline_data: InlineData

    @classmethod
    def from_encoded(cls, image: EncodedImage, mime_type: str | None = None) -> "ImagePart":
        """Build a request part, optionally overriding the MIME type."""
        return cls(
            inline_data=InlineData(
                mime_type=mime_type or image.mime_type,
                data=image.payload,
            )
        )

    def to_encoded(self) -> EncodedImage:
        return EncodedImage.from_base64(self.inline_data.data, self.inline_data.mime_type)


def _part_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "image" if ("inlineData" in value or "inline_data" in value) else "text"
    return "image" if isinstance(value, ImagePart) else "text"


Part = Annotated[
    Union[
        Annotated[TextPart, Tag("text")],
        Annotated[ImagePart, Tag("image")],
    ],
    Discriminator(_part_kind),
]


class Content(_WireModel):
    role: str | None = None
    parts: list[Part] = Field(default_factory=list)


class Candidate(_WireModel):
    content: Content | None = None
    finish_reason: str | None = None


class PromptFeedback(_WireModel):
    block_reason: str | None = None


class GenerateContentRequest(_WireModel):
    contents: list[Content]

    @classmethod
    def from_parts(cls, parts: list[TextPart | ImagePart]) -> "GenerateContentRequest":
        return cls(contents=[Content(role="user", parts=parts)])

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class GenerateContentResponse(_WireModel):
    candidates: list[Candidate] = Field(default_factory=list)
    prompt_feedback: PromptFeedback | None = None

    @property
    def first_parts(self) -> list[TextPart | ImagePart]:
        """Parts of the first candidate; later candidates are ignored."""
        if not self.candidates or self.candidates[0].content is None:
            return []
        return self.candidates[0].content.parts

    def inline_images(self) -> list[EncodedImage]:
        return [part.to_encoded() for part in self.first_parts if isinstance(part, ImagePart)]

    def texts(self) -> list[str]:
        return [part.text for part in self.first_parts if isinstance(part, TextPart) and part.text]
