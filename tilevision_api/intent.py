"""
Intent Extractor

Turns a free-text user request into a structured apply_textures command:
1. Send the prompt + catalog listing to Gemini with a single callable
   function, apply_textures
2. Validate the function-call arguments against ApplyTexturesArgs
3. Resolve floor/wall tile references to canonical catalog SKUs

Usage:
    result = await parse_prompt("Calacatta Gold on the floor, Carrara on the walls")
"""

import logging
from typing import Iterable, Optional

from google.genai import types
from pydantic import ValidationError

from tilevision_api.catalog import TileCatalog, get_catalog
from tilevision_api.config import config
from tilevision_api.genai_client import get_genai_client
from tilevision_api.matching import find_tile
from tilevision_api.models import ApplyTexturesArgs, ParsedIntent, ParsePromptResult, Tile

logger = logging.getLogger(__name__)

APPLY_TEXTURES = "apply_textures"

UNRECOGNIZED_PROMPT_MESSAGE = (
    "I'm sorry, I couldn't understand that request. Could you please rephrase it?"
)


class IntentSchemaError(ValueError):
    """The model invoked apply_textures with arguments of the wrong shape."""


APPLY_TEXTURES_DECLARATION = types.FunctionDeclaration(
    name=APPLY_TEXTURES,
    description="Apply tiles to room surfaces",
    parameters={
        "type": "OBJECT",
        "properties": {
            "floorTileSku": {
                "type": "STRING",
                "description": "The SKU of the tile to apply to the floor.",
            },
            "wallTileSku": {
                "type": "STRING",
                "description": "The SKU of the tile to apply to the wall.",
            },
            "groutWidthMm": {
                "type": "NUMBER",
                "description": "The width of the grout in millimeters.",
            },
            "orientationDeg": {
                "type": "NUMBER",
                "description": "The orientation of the tiles in degrees.",
            },
            "scaleMetersPerRepeat": {
                "type": "NUMBER",
                "description": "The scale of the tile pattern in meters per repeat.",
            },
        },
    },
)


def build_intent_prompt(prompt: str, catalog: TileCatalog) -> str:
    """Task text for the intent extraction call."""
    return f"""You are an expert interior design assistant. Your goal is to understand the user's request and translate it into a structured command for our tile visualization tool.

User prompt: "{prompt}"

Available tiles:
{catalog.listing()}

Based on the user's prompt, call the '{APPLY_TEXTURES}' tool with the correct parameters.
- Identify the tile names and map them to their SKUs.
- If the user specifies a tile for the "floor", use its SKU for 'floorTileSku'.
- If the user specifies a tile for the "wall", use its SKU for 'wallTileSku'.
- Extract any specified 'groutWidthMm', 'orientationDeg', or 'scaleMetersPerRepeat'.
"""


def extract_apply_textures_args(response) -> Optional[ApplyTexturesArgs]:
    """
    Pull the apply_textures arguments out of a Gemini response.

    Returns:
        The validated arguments, or None if the model did not call apply_textures

    Raises:
        IntentSchemaError: If the call's arguments do not match ApplyTexturesArgs
    """
    function_calls = getattr(response, "function_calls", None) or []
    call = next((fc for fc in function_calls if fc.name == APPLY_TEXTURES), None)

    if call is None:
        return None

    raw_args = call.args if call.args is not None else {}
    if not isinstance(raw_args, dict):
        raise IntentSchemaError(f"{APPLY_TEXTURES} arguments must be an object, got {type(raw_args).__name__}")

    try:
        return ApplyTexturesArgs.model_validate(raw_args)
    except ValidationError as e:
        raise IntentSchemaError(f"Invalid {APPLY_TEXTURES} arguments: {e}") from e


async def parse_prompt(prompt: str, tiles: Optional[Iterable[Tile]] = None) -> ParsePromptResult:
    """
    Parse a user's prompt into an apply_textures intent.

    Args:
        prompt: The user's natural language request
        tiles: Catalog to resolve against (defaults to the loaded catalog)

    Returns:
        ParsePromptResult with either parsed_intent or error set

    Raises:
        IntentSchemaError: If the model's function call is malformed
    """
    catalog = get_catalog() if tiles is None else TileCatalog(tiles)
    logger.info(f"Parsing prompt: '{prompt}'")

    response = await get_genai_client().aio.models.generate_content(
        model=config.INTENT_MODEL,
        contents=build_intent_prompt(prompt, catalog),
        config=types.GenerateContentConfig(
            temperature=0,
            tools=[types.Tool(function_declarations=[APPLY_TEXTURES_DECLARATION])],
        ),
    )

    args = extract_apply_textures_args(response)
    if args is None:
        logger.info("Model did not call apply_textures")
        return ParsePromptResult(error=UNRECOGNIZED_PROMPT_MESSAGE)

    # The model should return SKUs, but names are common, so every reference is resolved
    for field in ("floor_tile_sku", "wall_tile_sku"):
        reference = getattr(args, field)
        if not isinstance(reference, str):
            continue

        tile = find_tile(reference, catalog)
        if tile is None:
            logger.info(f"No tile matches '{reference}' ({field})")
            return ParsePromptResult(error=f"I couldn't find a tile matching '{reference}'.")

        setattr(args, field, tile.id)

    logger.info(f"Resolved intent: floor={args.floor_tile_sku}, wall={args.wall_tile_sku}")
    return ParsePromptResult(parsed_intent=ParsedIntent(args=args))
