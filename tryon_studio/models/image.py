"""Encoded image value used for preview and transmission."""

import base64

from pydantic import BaseModel, ConfigDict, field_validator

from ..errors import MalformedImageError


DATA_URI_PREFIX = "data:"
DEFAULT_MIME_TYPE = "application/octet-stream"


def split_data_uri(uri: str) -> tuple[str, str]:
    """Split a data URI into its header and base64 payload.

    Raises:
        MalformedImageError: if the prefix or the `,` separator is missing.
    """
    if not uri.startswith(DATA_URI_PREFIX):
        raise MalformedImageError(f"not a data URI: {uri[:40]!r}")
    header, sep, payload = uri.partition(",")
    if not sep:
        raise MalformedImageError("data URI has no payload separator")
    return header, payload


class EncodedImage(BaseModel):
    """An image carried as `data:<mime>;base64,<payload>`.

    Instances are immutable and compare by value, so the same picture
    generated twice is still one pool entry per generation call but two
    equal values.
    """

    model_config = ConfigDict(frozen=True)

    uri: str

    @field_validator("uri")
    @classmethod
    def _check_uri(cls, value: str) -> str:
        split_data_uri(value)
        return value

    @classmethod
    def from_base64(cls, payload: str, mime_type: str) -> "EncodedImage":
        return cls(uri=f"data:{mime_type};base64,{payload}")

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "EncodedImage":
        return cls.from_base64(base64.b64encode(data).decode("ascii"), mime_type)

    @property
    def mime_type(self) -> str:
        header, _ = split_data_uri(self.uri)
        media = header[len(DATA_URI_PREFIX):].split(";", 1)[0]
        return media or DEFAULT_MIME_TYPE

    @property
    def payload(self) -> str:
        """Base64 payload without the MIME prefix."""
        return split_data_uri(self.uri)[1]

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.payload)

    def __str__(self) -> str:
        return self.uri
