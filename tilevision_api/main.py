"""
TileVision API

FastAPI application providing endpoints for:
- /health: Health check
- /tiles: Tile catalog listing, lookup and free-text resolution
- /prompt/parse: Free-text request -> apply_textures intent
- /render/options: Three candidate renders of the room with the chosen tiles
- /render/visualize: One render with explicit grout/orientation/scale
- /visualizer/*: Chat-driven visualizer flow over state snapshots
- /admin/*: Dashboard, credit ledger and tile collection (mock data)

Run locally: python -m tilevision_api.main
"""

import logging
from contextlib import asynccontextmanager
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from google.genai import errors
from pydantic import BaseModel, Field

from tilevision_api.admin import LEDGER_ENTRIES, credit_balances, get_dashboard, list_admin_tiles
from tilevision_api.catalog import UnknownTileError, get_catalog
from tilevision_api.config import config
from tilevision_api.intent import IntentSchemaError, parse_prompt
from tilevision_api.matching import find_tile
from tilevision_api.models import (
    AdminTile,
    CreditsResponse,
    DashboardResponse,
    HealthResponse,
    ParsePromptRequest,
    ParsePromptResult,
    RenderOptionsRequest,
    RenderOptionsResponse,
    Tile,
    VisualizeRequest,
    VisualizeResponse,
)
from tilevision_api.renderer import RenderGenerationError, get_render_options, visualize_tile_in_room
from tilevision_api.state import RoomPhotoUploaded, VisualizerState, reduce
from tilevision_api.visualizer import select_tile, submit_prompt

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class VisualizerPromptRequest(BaseModel):
    """Request payload for the /visualizer/prompt endpoint."""

    state: VisualizerState = Field(default_factory=VisualizerState)
    prompt: str = Field(..., description="Prompt typed into the visualizer chat")


class VisualizerSelectTileRequest(BaseModel):
    """Request payload for the /visualizer/select-tile endpoint."""

    state: VisualizerState = Field(default_factory=VisualizerState)
    tile_id: str
    append_to_prompt: bool = True


class VisualizerUploadRequest(BaseModel):
    """Request payload for the /visualizer/room-photo endpoint."""

    state: VisualizerState = Field(default_factory=VisualizerState)
    room_photo_data_uri: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info("=" * 50)
    logger.info("TileVision API Starting")
    logger.info(f"Intent model: {config.INTENT_MODEL}")
    logger.info(f"Image model: {config.IMAGE_MODEL}")
    logger.info("=" * 50)

    # Load the catalog up front (don't fail startup, it is retried on first request)
    try:
        catalog = get_catalog()
        logger.info(f"Tile catalog ready with {len(catalog)} tiles")
    except Exception as e:
        logger.warning(f"Tile catalog loading skipped: {e}")

    yield

    # Shutdown
    logger.info("TileVision API Shutting Down")


# Create FastAPI app
app = FastAPI(
    title="TileVision API",
    description="AI-powered floor and wall tile visualization for room photos",
    version="0.1.0",
    lifespan=lifespan
)

# Add CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version="0.1.0")


@app.get("/tiles", response_model=list[Tile], tags=["Catalog"])
async def list_tiles(category: Optional[Literal["floor", "wall"]] = None):
    """List catalog tiles, optionally only floor or wall tiles."""
    catalog = get_catalog()
    if category:
        return catalog.by_category(category)
    return list(catalog)


@app.get("/tiles/resolve", response_model=Tile, tags=["Catalog"])
async def resolve_tile(q: str):
    """
    Resolve free text (SKU, name or keywords) to a catalog tile.

    Args:
        q: Text as typed by the user (e.g., "calacatta", "oak")
    """
    tile = find_tile(q)
    if tile is None:
        raise HTTPException(status_code=404, detail=f"I couldn't find a tile matching '{q}'.")
    return tile


@app.get("/tiles/{tile_id}", response_model=Tile, tags=["Catalog"])
async def get_tile(tile_id: str):
    """Get a single tile by SKU."""
    tile = get_catalog().get(tile_id)
    if tile is None:
        raise HTTPException(status_code=404, detail=f"Tile not found: {tile_id}")
    return tile


@app.post("/prompt/parse", response_model=ParsePromptResult, tags=["Intent"])
async def parse_prompt_endpoint(request: ParsePromptRequest):
    """
    Parse a natural language request into an apply_textures intent.

    Unrecognized requests and unknown tile names are reported in the
    'error' field of the result, not as HTTP errors.
    """
    try:
        return await parse_prompt(request.prompt)
    except IntentSchemaError as e:
        logger.error(f"Prompt parsing failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Prompt parsing failed: {e}")
        raise HTTPException(status_code=500, detail=f"Prompt parsing failed: {str(e)}")


@app.post("/render/options", response_model=RenderOptionsResponse, tags=["Render"])
async def render_options_endpoint(request: RenderOptionsRequest):
    """
    Generate three rendering options for the room with the chosen tiles.

    Options for which the model returned no image are dropped.
    """
    try:
        options = await get_render_options(request)
    except UnknownTileError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RenderGenerationError as e:
        logger.error(f"Render options failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Render options failed: {e}")
        raise HTTPException(status_code=500, detail=f"Render generation failed: {str(e)}")

    render_options = [option for option in options if option]
    if not render_options:
        raise HTTPException(status_code=502, detail="AI failed to generate a valid image. Please try again.")

    return RenderOptionsResponse(render_options=render_options)


@app.post("/render/visualize", response_model=VisualizeResponse, tags=["Render"])
async def visualize_endpoint(request: VisualizeRequest):
    """Render the room once with explicit grout width, orientation and scale."""
    try:
        rendered = await visualize_tile_in_room(request)
        return VisualizeResponse(rendered_photo_data_uri=rendered)
    except UnknownTileError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RenderGenerationError as e:
        logger.error(f"Visualization failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Visualization failed: {e}")
        raise HTTPException(status_code=500, detail=f"Render generation failed: {str(e)}")


@app.post("/visualizer/room-photo", response_model=VisualizerState, tags=["Visualizer"])
async def visualizer_room_photo(request: VisualizerUploadRequest):
    """Attach a room photo (data URI) to the visualizer state."""
    return reduce(request.state, RoomPhotoUploaded(data_uri=request.room_photo_data_uri))


@app.post("/visualizer/select-tile", response_model=VisualizerState, tags=["Visualizer"])
async def visualizer_select_tile(request: VisualizerSelectTileRequest):
    """Select a floor or wall tile in the visualizer state."""
    return select_tile(request.state, request.tile_id, append_to_prompt=request.append_to_prompt)


@app.post("/visualizer/prompt", response_model=VisualizerState, tags=["Visualizer"])
async def visualizer_prompt(request: VisualizerPromptRequest):
    """
    Submit a chat prompt: parse it, then render with the resolved tiles.

    Failures are reported in the returned state (error + system message).
    """
    try:
        return await submit_prompt(
            request.state,
            request.prompt,
            parse=parse_prompt,
            render=get_render_options,
        )
    except errors.APIError as e:
        logger.error(f"Visualizer prompt failed: {e}")
        raise HTTPException(status_code=502, detail=f"Visualizer prompt failed: {str(e)}")
    except Exception as e:
        logger.error(f"Visualizer prompt failed: {e}")
        raise HTTPException(status_code=500, detail=f"Visualizer prompt failed: {str(e)}")


@app.get("/admin/dashboard", response_model=DashboardResponse, tags=["Admin"])
async def admin_dashboard():
    """Dashboard figures (mock data)."""
    return get_dashboard()


@app.get("/admin/credits", response_model=CreditsResponse, tags=["Admin"])
async def admin_credits():
    """Credit ledger and per-user balances (mock data, display only)."""
    return CreditsResponse(entries=list(LEDGER_ENTRIES), balances=credit_balances(LEDGER_ENTRIES))


@app.get("/admin/tiles", response_model=list[AdminTile], tags=["Admin"])
async def admin_tiles():
    """Tile collection of the organization."""
    return list_admin_tiles()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "tilevision_api.main:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=True
    )
