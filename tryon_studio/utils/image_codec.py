"""Convert local files and uploads into encoded images."""

import asyncio
import io
import logging
import mimetypes
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..errors import ReadError
from ..models.image import DEFAULT_MIME_TYPE, EncodedImage, split_data_uri


logger = logging.getLogger(__name__)


def sniff_mime_type(
    raw: bytes,
    filename: str | None = None,
    content_type: str | None = None,
) -> str:
    """Pick a MIME type for raw image bytes.

    Order: an explicit image/* content type, the filename extension, then the
    file header as identified by Pillow. Pixels are never decoded.
    """
    if content_type and content_type.startswith("image/"):
        return content_type

    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed and guessed.startswith("image/"):
            return guessed

    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        return DEFAULT_MIME_TYPE
    return Image.MIME.get(fmt, DEFAULT_MIME_TYPE) if fmt else DEFAULT_MIME_TYPE


def encode_bytes(
    raw: bytes,
    filename: str | None = None,
    content_type: str | None = None,
) -> EncodedImage:
    """Encode in-memory bytes, e.g. an HTTP upload."""
    if not raw:
        raise ReadError(f"empty image data{f' in {filename}' if filename else ''}")
    return EncodedImage.from_bytes(raw, sniff_mime_type(raw, filename, content_type))


async def encode(path: Path) -> EncodedImage:
    """Read a local file and encode it as a data URI.

    Raises:
        ReadError: if the file cannot be read.
    """
    path = Path(path)
    try:
        raw = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise ReadError(f"cannot read {path}: {e}") from e

    image = encode_bytes(raw, filename=path.name)
    logger.debug("Encoded %s as %s (%d bytes)", path.name, image.mime_type, len(raw))
    return image


def strip_payload(image: EncodedImage | str) -> str:
    """Return the base64 payload, discarding the `data:<mime>;base64,` prefix.

    Raises:
        MalformedImageError: if no separator is found.
    """
    uri = image.uri if isinstance(image, EncodedImage) else image
    return split_data_uri(uri)[1]


def decode(image: EncodedImage) -> bytes:
    """Raw image bytes, e.g. for a download."""
    return image.to_bytes()
