# Test fixtures and configuration
import base64
import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tryon_studio.config import StudioConfig
from tryon_studio.models import EncodedImage
from tryon_studio.pipeline import NoticeBoard, TryOnStudio


MINIMAL_PNG = bytes([
    0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,  # PNG signature
    0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,  # IHDR chunk
    0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,  # 1x1 dimensions
    0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53,
    0xDE, 0x00, 0x00, 0x00, 0x0C, 0x49, 0x44, 0x41,  # IDAT chunk
    0x54, 0x08, 0xD7, 0x63, 0xF8, 0xCF, 0xC0, 0x00,
    0x00, 0x00, 0x03, 0x00, 0x01, 0x00, 0x05, 0xFE,
    0xD4, 0xAA, 0x00, 0x00, 0x00, 0x00, 0x49, 0x45,  # IEND chunk
    0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82
])


def make_image(tag: str, mime_type: str = "image/png") -> EncodedImage:
    """Distinct fake image whose payload decodes to `tag`."""
    return EncodedImage.from_bytes(tag.encode(), mime_type)


@pytest.fixture
def minimal_png_bytes():
    """Minimal valid PNG image bytes."""
    return MINIMAL_PNG


@pytest.fixture
def png_data_uri(minimal_png_bytes):
    return f"data:image/png;base64,{base64.b64encode(minimal_png_bytes).decode()}"


@pytest.fixture
def temp_image_file(tmp_path, minimal_png_bytes):
    """Create a temporary PNG file."""
    img_path = tmp_path / "test_image.png"
    img_path.write_bytes(minimal_png_bytes)
    return img_path


@pytest.fixture
def images():
    """Named sample images: P1, G1, G2, R1, R2."""
    return {name: make_image(name) for name in ("P1", "G1", "G2", "R1", "R2")}


@pytest.fixture
def mock_client():
    """Generation client returning nothing until told otherwise."""
    client = AsyncMock()
    client.synthesize_garment = AsyncMock(return_value=[])
    client.synthesize_try_on = AsyncMock(return_value=[])
    return client


@pytest.fixture
def config():
    return StudioConfig(gemini_api_key="test-key")


@pytest.fixture
def studio(config, mock_client):
    """Studio wired to the mock client and a notice board."""
    return TryOnStudio(config, client=mock_client, notifier=NoticeBoard())
