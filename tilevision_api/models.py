"""
Pydantic models for the TileVision application.

Defines data validation schemas for:
- Tile catalog entries
- Prompt intent parsing (apply_textures arguments and results)
- Render requests and responses
- Visualizer chat messages
- Admin dashboard mock data
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, computed_field


class Tile(BaseModel):
    """Represents a tile in the catalog."""

    id: str = Field(..., description="Unique SKU of the tile (floor-* or wall-*)")
    name: str = Field(..., description="Display name of the tile")
    hint: str = Field(default="", description="Free-text description used for matching")
    image_url: str = Field(default="", description="Texture image URL or data URI")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "id": "floor-calacatta-gold",
                "name": "Calacatta Gold",
                "hint": "white marble",
                "image_url": "https://picsum.photos/seed/calacatta/400/400",
            }
        },
    }

    @computed_field
    @property
    def category(self) -> Optional[str]:
        """Surface the tile belongs to, derived from the id prefix."""
        if self.id.startswith("floor-"):
            return "floor"
        if self.id.startswith("wall-"):
            return "wall"
        return None

    @property
    def display_sku(self) -> str:
        return f"SKU-{self.id.upper()}"


class ApplyTexturesArgs(BaseModel):
    """Arguments of the apply_textures operation returned by the language model."""

    floor_tile_sku: Optional[str] = Field(
        None, alias="floorTileSku", description="The SKU of the tile to apply to the floor."
    )
    wall_tile_sku: Optional[str] = Field(
        None, alias="wallTileSku", description="The SKU of the tile to apply to the wall."
    )
    grout_width_mm: Optional[float] = Field(
        None, alias="groutWidthMm", description="The width of the grout in millimeters."
    )
    orientation_deg: Optional[float] = Field(
        None, alias="orientationDeg", description="The orientation of the tiles in degrees."
    )
    scale_meters_per_repeat: Optional[float] = Field(
        None,
        alias="scaleMetersPerRepeat",
        description="The scale of the tile pattern in meters per repeat.",
    )

    model_config = {"populate_by_name": True}


class ParsedIntent(BaseModel):
    """
    A resolved apply_textures intent.

    The /prompt/parse response uses the camelCase names of the
    apply_textures function declaration throughout.
    """

    type: Literal["apply_textures"] = "apply_textures"
    args: ApplyTexturesArgs


class TileIdentifier(BaseModel):
    user_text: str = Field(..., alias="userText", description="The exact text the user provided for the tile.")
    matched_id: str = Field(..., alias="matchedId", description="The matched tile ID/SKU.")
    score: float = Field(..., description="The confidence score of the match.")

    model_config = {"populate_by_name": True}


class AmbiguousMatch(BaseModel):
    user_text: str = Field(..., alias="userText")
    options: list[TileIdentifier] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class ParsePromptRequest(BaseModel):
    """Request payload for the /prompt/parse endpoint."""

    prompt: str = Field(
        ...,
        description="The user's natural language prompt",
        examples=["apply Calacatta Gold on floor and Carrara on wall"],
    )


class ParsePromptResult(BaseModel):
    """
    Result of parsing a user prompt.

    Exactly one of parsed_intent or error is set. ambiguous_matches is part of
    the response schema but is never populated by the resolver.
    """

    parsed_intent: Optional[ParsedIntent] = Field(None, alias="parsedIntent")
    ambiguous_matches: Optional[list[AmbiguousMatch]] = Field(None, alias="ambiguousMatches")
    error: Optional[str] = None

    model_config = {"populate_by_name": True}


class RenderOptionsRequest(BaseModel):
    """
    Request payload for the /render/options endpoint.

    Each option keeps its own tile orientation; use /render/visualize to
    choose one explicitly.
    """

    room_photo_data_uri: str = Field(
        ..., description="Room photo as a data URI ('data:<mimetype>;base64,<encoded_data>')"
    )
    floor_tile_id: str = Field(..., description="SKU of the floor tile")
    wall_tile_id: str = Field(..., description="SKU of the wall tile")
    grout_width: Optional[float] = Field(
        None, ge=0, le=10, description="Grout width in pixels for every option (default: per option)"
    )
    tile_scale: Optional[float] = Field(
        None, ge=0.5, le=2, description="Tile scale relative to the room for every option (default: per option)"
    )


class RenderOptionsResponse(BaseModel):
    """Response payload for the /render/options endpoint."""

    render_options: list[str] = Field(
        default_factory=list, description="Rendered images as data URIs"
    )


class VisualizeRequest(BaseModel):
    """Request payload for the /render/visualize endpoint."""

    room_photo_data_uri: str = Field(..., description="Room photo as a data URI")
    floor_tile_id: str = Field(..., description="SKU of the floor tile")
    wall_tile_id: str = Field(..., description="SKU of the wall tile")
    grout_width: float = Field(default=2, ge=0, le=10, description="Grout width in pixels")
    tile_orientation: Literal["horizontal", "vertical"] = Field(default="horizontal")
    tile_scale: float = Field(default=1, ge=0.5, le=2, description="Tile scale relative to the room")


class VisualizeResponse(BaseModel):
    """Response payload for the /render/visualize endpoint."""

    rendered_photo_data_uri: str = Field(..., description="The rendered photo as a data URI")


class ChatMessage(BaseModel):
    """One entry of the visualizer chat."""

    id: str
    role: Literal["user", "system"]
    content: str

    model_config = {"frozen": True}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="0.1.0")


class CreditLedgerEntry(BaseModel):
    """An entry of the (display-only) credit ledger."""

    id: str
    user_id: str
    reason: str
    debit: int = 0
    credit: int = 0
    created_at: datetime


class CreditsResponse(BaseModel):
    """Response payload for the /admin/credits endpoint."""

    entries: list[CreditLedgerEntry] = Field(default_factory=list)
    balances: dict[str, int] = Field(default_factory=dict, description="Balance per user id")


class MonthlyRenderCount(BaseModel):
    month: str
    success: int
    failed: int


class ActivityItem(BaseModel):
    user_name: str
    initials: str
    avatar_url: str
    description: str


class LowCreditUser(BaseModel):
    user_name: str
    email: str
    initials: str
    avatar_url: str
    credits: int


class DashboardStats(BaseModel):
    total_renders: int
    total_renders_change: str
    active_users: int
    active_users_change: str
    credits_used: int
    credits_used_change: str
    success_rate: float
    success_rate_change: str


class DashboardResponse(BaseModel):
    """Response payload for the /admin/dashboard endpoint."""

    stats: DashboardStats
    render_history: list[MonthlyRenderCount] = Field(default_factory=list)
    recent_activity: list[ActivityItem] = Field(default_factory=list)
    low_credit_users: list[LowCreditUser] = Field(default_factory=list)


class AdminTile(BaseModel):
    """A row of the admin tile collection table."""

    id: str
    name: str
    category: Optional[str] = None
    sku: str
    image_url: str
