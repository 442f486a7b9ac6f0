"""
Shared fixtures for the TileVision tests.

The Gemini client is never contacted: tests patch get_genai_client with a
MagicMock whose aio.models.generate_content is an AsyncMock returning
lightweight stand-ins for GenerateContentResponse.
"""

import io
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from PIL import Image

from tilevision_api.catalog import TileCatalog
from tilevision_api.config import config
from tilevision_api.models import Tile
from tilevision_api.renderer import to_data_uri


def make_png(color: tuple[int, int, int] = (200, 200, 200)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format="PNG")
    return buffer.getvalue()


def function_call_response(name: str, args) -> SimpleNamespace:
    """A response whose model turn is a single function call."""
    return SimpleNamespace(
        function_calls=[SimpleNamespace(name=name, args=args)],
        parts=[],
    )


def text_response(text: str) -> SimpleNamespace:
    """A response with free-form text only."""
    return SimpleNamespace(
        function_calls=None,
        parts=[SimpleNamespace(text=text, inline_data=None)],
    )


def image_response(image_bytes: bytes, mime_type: str = "image/png") -> SimpleNamespace:
    """A response carrying a generated image."""
    return SimpleNamespace(
        function_calls=None,
        parts=[
            SimpleNamespace(text="Here is the room.", inline_data=None),
            SimpleNamespace(text=None, inline_data=SimpleNamespace(data=image_bytes, mime_type=mime_type)),
        ],
    )


@pytest.fixture
def catalog() -> TileCatalog:
    """The bundled tile catalog."""
    return TileCatalog.from_file(config.CATALOG_PATH)


@pytest.fixture
def room_photo_data_uri() -> str:
    return to_data_uri(make_png((180, 170, 160)), "image/png")


@pytest.fixture
def texture_catalog() -> TileCatalog:
    """A small catalog whose textures are inline, so nothing is downloaded."""
    return TileCatalog([
        Tile(
            id="floor-test-marble",
            name="Test Marble",
            hint="white marble",
            image_url=to_data_uri(make_png((250, 250, 250)), "image/png"),
        ),
        Tile(
            id="wall-test-subway",
            name="Test Subway",
            hint="glossy ceramic",
            image_url=to_data_uri(make_png((240, 240, 255)), "image/png"),
        ),
    ])


@pytest.fixture
def genai_client():
    """Patch the GenAI client used by the intent and render modules."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()

    with patch("tilevision_api.intent.get_genai_client", return_value=client), \
            patch("tilevision_api.renderer.get_genai_client", return_value=client):
        yield client
