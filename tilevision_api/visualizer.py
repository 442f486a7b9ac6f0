"""
Visualizer Session Flow

Drives the prompt → intent → render loop on top of VisualizerState snapshots:
- submit_prompt: record the user's message, parse it, fall back to the
  previously selected tiles and trigger a render
- trigger_visualization: request render options and keep the first valid image
- select_tile: pick a tile from the catalog

Every function takes a snapshot and returns the resulting snapshot; errors end
up in state.error and as a system chat message instead of being raised.
"""

import logging
from functools import partial
from typing import Awaitable, Callable, Optional

from google.genai import errors

from tilevision_api.catalog import TileCatalog, UnknownTileError, get_catalog
from tilevision_api.intent import IntentSchemaError, parse_prompt
from tilevision_api.models import ParsePromptResult, RenderOptionsRequest
from tilevision_api.renderer import get_render_options
from tilevision_api.state import (
    PromptRejected,
    TileSelected,
    UserMessageAdded,
    VisualizationFailed,
    VisualizationStarted,
    VisualizationSucceeded,
    VisualizerState,
    reduce,
)

logger = logging.getLogger(__name__)

NO_ROOM_PHOTO_MESSAGE = "Please upload a photo of your room first."
TILE_NOT_FOUND_MESSAGE = "Selected tile not found."
INVALID_RENDER_MESSAGE = "AI failed to generate a valid image. Please try again."
MISSING_SELECTION_MESSAGE = "Please select both a floor and a wall tile."
UNPARSEABLE_RESPONSE_MESSAGE = "Something went wrong while reading that request. Please try again."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."

PromptParser = Callable[[str], Awaitable[ParsePromptResult]]
RenderOptionsGenerator = Callable[[RenderOptionsRequest], Awaitable[list[str]]]


async def trigger_visualization(
    state: VisualizerState,
    floor_tile_id: str,
    wall_tile_id: str,
    render: Optional[RenderOptionsGenerator] = None,
    catalog: Optional[TileCatalog] = None,
) -> VisualizerState:
    """
    Render the room with the given tiles and keep the first valid option.

    Args:
        render: Render options generator (defaults to get_render_options
            resolving tiles against the same catalog)

    Returns:
        The snapshot after the render succeeded or failed
    """
    catalog = catalog if catalog is not None else get_catalog()
    if render is None:
        render = partial(get_render_options, catalog=catalog)
    state = reduce(state, VisualizationStarted())

    if not state.room_photo:
        logger.info("Visualization requested without a room photo")
        return reduce(state, VisualizationFailed(error=NO_ROOM_PHOTO_MESSAGE))

    if floor_tile_id not in catalog or wall_tile_id not in catalog:
        return reduce(state, VisualizationFailed(error=TILE_NOT_FOUND_MESSAGE))

    try:
        options = await render(
            RenderOptionsRequest(
                room_photo_data_uri=state.room_photo,
                floor_tile_id=floor_tile_id,
                wall_tile_id=wall_tile_id,
                grout_width=2,
                tile_scale=1,
            )
        )
    except (ValueError, UnknownTileError, errors.APIError) as e:
        logger.error(f"Visualization failed: {e}")
        return reduce(state, VisualizationFailed(error=str(e) or UNEXPECTED_ERROR_MESSAGE))
    except Exception as e:
        logger.error(f"Unexpected visualization failure: {e}")
        return reduce(state, VisualizationFailed(error=str(e) or UNEXPECTED_ERROR_MESSAGE))

    final_render = next((option for option in options if option and option.startswith("data:image")), None)
    if final_render is None:
        logger.warning("No render option contained an image")
        return reduce(state, VisualizationFailed(error=INVALID_RENDER_MESSAGE))

    return reduce(state, VisualizationSucceeded(render=final_render))


async def submit_prompt(
    state: VisualizerState,
    prompt: str,
    parse: Optional[PromptParser] = None,
    render: Optional[RenderOptionsGenerator] = None,
    catalog: Optional[TileCatalog] = None,
) -> VisualizerState:
    """
    Handle a prompt typed into the visualizer chat.

    Tiles the prompt does not mention fall back to the tiles already selected
    in the state. Unless given, parse and render resolve tiles against catalog.
    """
    if parse is None:
        parse = partial(parse_prompt, tiles=catalog)
    state = reduce(state, UserMessageAdded(content=prompt))

    try:
        result = await parse(prompt)
    except (IntentSchemaError, errors.APIError) as e:
        logger.error(f"Prompt parsing failed: {e}")
        return reduce(state, PromptRejected(error=UNPARSEABLE_RESPONSE_MESSAGE))
    except Exception as e:
        logger.error(f"Unexpected prompt parsing failure: {e}")
        return reduce(state, PromptRejected(error=str(e) or UNEXPECTED_ERROR_MESSAGE))

    if result.error:
        return reduce(state, PromptRejected(error=result.error))

    if result.parsed_intent is None:
        return reduce(state, PromptRejected(error=UNPARSEABLE_RESPONSE_MESSAGE))

    args = result.parsed_intent.args
    floor_tile_id = args.floor_tile_sku or state.floor_tile_id
    wall_tile_id = args.wall_tile_sku or state.wall_tile_id

    if not floor_tile_id or not wall_tile_id:
        return reduce(state, PromptRejected(error=MISSING_SELECTION_MESSAGE))

    return await trigger_visualization(state, floor_tile_id, wall_tile_id, render=render, catalog=catalog)


def select_tile(
    state: VisualizerState,
    tile_id: str,
    append_to_prompt: bool = True,
    catalog: Optional[TileCatalog] = None,
) -> VisualizerState:
    """Select a catalog tile; unknown ids leave the state unchanged."""
    tile = (catalog if catalog is not None else get_catalog()).get(tile_id)
    if tile is None:
        logger.info(f"Ignoring selection of unknown tile {tile_id}")
        return state
    return reduce(state, TileSelected(tile=tile, append_to_prompt=append_to_prompt))
