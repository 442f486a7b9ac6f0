"""
Render Engine

Applies floor and wall tile textures to a room photo with Gemini image generation:
1. Decode the room photo data URI and check it is a readable image
2. Load the floor and wall tile textures (data URI or downloaded from the catalog URL)
3. Ask the image model to apply both textures with the given grout width,
   orientation and scale
4. Return the generated image as a data URI

get_render_options produces three variants with different default parameters
so the user can pick the most convincing one.

Usage:
    options = await get_render_options(RenderOptionsRequest(...))
"""

import asyncio
import base64
import binascii
import io
import logging
import re
from typing import Optional

import httpx
from PIL import Image
from google.genai import types

from tilevision_api.catalog import TileCatalog, get_catalog
from tilevision_api.config import config
from tilevision_api.genai_client import get_genai_client
from tilevision_api.models import RenderOptionsRequest, Tile, VisualizeRequest

logger = logging.getLogger(__name__)

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)

# (grout width px, orientation, scale) per render option
RENDER_OPTION_DEFAULTS: tuple[tuple[float, str, float], ...] = (
    (2, "horizontal", 1.0),
    (3, "vertical", 1.2),
    (1, "horizontal", 0.8),
)


class RenderGenerationError(ValueError):
    """The image model returned no usable image, or a texture could not be loaded."""


def parse_data_uri(data_uri: str) -> tuple[bytes, str]:
    """
    Decode a 'data:<mimetype>;base64,<encoded_data>' URI.

    Returns:
        Tuple of (raw bytes, mime type)

    Raises:
        ValueError: If the string is not a base64 data URI
    """
    match = _DATA_URI.match(data_uri.strip())
    if not match:
        raise ValueError("Expected a base64 data URI ('data:<mimetype>;base64,<encoded_data>')")

    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Invalid base64 image data")

    return data, match.group("mime")


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def get_mime_type(url: str) -> str:
    """Get MIME type from URL extension."""
    url_lower = url.lower().split("?")[0]
    if url_lower.endswith(".png"):
        return "image/png"
    elif url_lower.endswith(".jpg") or url_lower.endswith(".jpeg"):
        return "image/jpeg"
    elif url_lower.endswith(".webp"):
        return "image/webp"
    return "image/jpeg"


def validate_room_photo(image_bytes: bytes) -> None:
    """Check that the room photo is an image Pillow can read."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.verify()
    except Exception as e:
        logger.error(f"Failed to open room photo: {e}")
        raise ValueError("Invalid image data")


async def load_tile_texture(
    tile: Tile,
    http_client: Optional[httpx.AsyncClient] = None
) -> tuple[bytes, str]:
    """
    Load a tile's texture image.

    Args:
        tile: Catalog tile whose image_url is a data URI or an http(s) URL
        http_client: Optional shared client for downloads

    Returns:
        Tuple of (image bytes, mime type)
    """
    if not tile.image_url:
        raise RenderGenerationError(f"Tile {tile.id} has no texture image")

    if tile.image_url.startswith("data:"):
        return parse_data_uri(tile.image_url)

    logger.info(f"Downloading texture for {tile.id} from {tile.image_url}")

    try:
        if http_client is None:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(tile.image_url)
        else:
            response = await http_client.get(tile.image_url)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Texture download failed for {tile.id}: {e}")
        raise RenderGenerationError(f"Failed to load texture for tile {tile.id}") from e

    content_type = response.headers.get("content-type", "").split(";")[0].strip()
    mime_type = content_type if content_type.startswith("image/") else get_mime_type(tile.image_url)
    return response.content, mime_type


def build_render_instructions(grout_width: float, orientation: str, scale: float) -> str:
    surfaces = []
    for surface in ("floor", "wall"):
        surfaces.append(
            f"Apply the {surface} tile texture to the {surface} with a grout width of {grout_width:g}, "
            f"a {orientation} tile orientation, and a tile scale of {scale:g}."
        )
    return " ".join(surfaces)


async def render_tiles(
    room_image_bytes: bytes,
    room_mime_type: str,
    floor_texture: tuple[bytes, str],
    wall_texture: tuple[bytes, str],
    grout_width: float,
    orientation: str,
    scale: float,
) -> str:
    """
    Run one image generation call.

    Returns:
        The generated image as a data URI, or "" if the model returned no image
    """
    parts = [
        types.Part.from_bytes(data=room_image_bytes, mime_type=room_mime_type),
        types.Part.from_text(text="Floor tile texture:"),
        types.Part.from_bytes(data=floor_texture[0], mime_type=floor_texture[1]),
        types.Part.from_text(text="Wall tile texture:"),
        types.Part.from_bytes(data=wall_texture[0], mime_type=wall_texture[1]),
        types.Part.from_text(text=build_render_instructions(grout_width, orientation, scale)),
    ]

    # IMAGE alone is rejected by the model, TEXT must be requested too
    generate_config = types.GenerateContentConfig(
        response_modalities=["TEXT", "IMAGE"],
    )

    logger.info(f"Calling {config.IMAGE_MODEL} (grout={grout_width:g}, orientation={orientation}, scale={scale:g})")

    response = await get_genai_client(config.IMAGE_LOCATION).aio.models.generate_content(
        model=config.IMAGE_MODEL,
        contents=[types.Content(role="user", parts=parts)],
        config=generate_config,
    )

    for part in response.parts or []:
        if part.text:
            logger.info(f"Model text: {part.text[:200]}...")
        if getattr(part, "inline_data", None) and part.inline_data.data:
            return to_data_uri(part.inline_data.data, part.inline_data.mime_type or "image/png")

    logger.warning("Image model returned no image")
    return ""


async def _prepare_inputs(
    room_photo_data_uri: str,
    floor_tile_id: str,
    wall_tile_id: str,
    catalog: Optional[TileCatalog],
) -> tuple[bytes, str, tuple[bytes, str], tuple[bytes, str]]:
    catalog = catalog if catalog is not None else get_catalog()
    floor_tile = catalog.require(floor_tile_id)
    wall_tile = catalog.require(wall_tile_id)

    room_bytes, room_mime = parse_data_uri(room_photo_data_uri)
    validate_room_photo(room_bytes)

    async with httpx.AsyncClient(follow_redirects=True) as http_client:
        floor_texture, wall_texture = await asyncio.gather(
            load_tile_texture(floor_tile, http_client),
            load_tile_texture(wall_tile, http_client),
        )

    return room_bytes, room_mime, floor_texture, wall_texture


async def visualize_tile_in_room(
    request: VisualizeRequest,
    catalog: Optional[TileCatalog] = None
) -> str:
    """
    Render the room once with the requested tiles and parameters.

    Returns:
        The rendered photo as a data URI

    Raises:
        UnknownTileError: If either tile id is not in the catalog
        ValueError: If the room photo is not a valid image data URI
        RenderGenerationError: If the model returned no image
    """
    logger.info(f"Visualizing floor={request.floor_tile_id}, wall={request.wall_tile_id}")

    room_bytes, room_mime, floor_texture, wall_texture = await _prepare_inputs(
        request.room_photo_data_uri, request.floor_tile_id, request.wall_tile_id, catalog
    )

    rendered = await render_tiles(
        room_bytes,
        room_mime,
        floor_texture,
        wall_texture,
        grout_width=request.grout_width,
        orientation=request.tile_orientation,
        scale=request.tile_scale,
    )

    if not rendered:
        raise RenderGenerationError("Failed to generate image - no image in response")

    return rendered


async def get_render_options(
    request: RenderOptionsRequest,
    catalog: Optional[TileCatalog] = None
) -> list[str]:
    """
    Generate three rendering options with slightly different tile layouts.

    Explicit grout width / scale on the request override each option's
    default; every option keeps its own orientation.

    Returns:
        Three data URIs in option order, "" for options without an image
    """
    logger.info("=" * 50)
    logger.info("Generating render options")
    logger.info(f"Floor: {request.floor_tile_id}, Wall: {request.wall_tile_id}")
    logger.info("=" * 50)

    room_bytes, room_mime, floor_texture, wall_texture = await _prepare_inputs(
        request.room_photo_data_uri, request.floor_tile_id, request.wall_tile_id, catalog
    )

    renders = await asyncio.gather(*[
        render_tiles(
            room_bytes,
            room_mime,
            floor_texture,
            wall_texture,
            grout_width=request.grout_width or default_grout,
            orientation=orientation,
            scale=request.tile_scale or default_scale,
        )
        for default_grout, orientation, default_scale in RENDER_OPTION_DEFAULTS
    ])

    logger.info(f"Render options complete: {sum(1 for r in renders if r)}/{len(renders)} with images")
    return list(renders)
