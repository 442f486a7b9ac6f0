"""
Integration tests against the live Gemini API.

Run with: pytest -m integration (requires GOOGLE_API_KEY or Vertex AI credentials)
"""

import pytest

from tilevision_api.config import config
from tilevision_api.intent import parse_prompt

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not (config.GOOGLE_API_KEY or (config.GOOGLE_GENAI_USE_VERTEXAI and config.GOOGLE_CLOUD_PROJECT)),
        reason="Gemini credentials not configured",
    ),
]


@pytest.mark.asyncio
async def test_parse_prompt_live():
    result = await parse_prompt("apply Calacatta Gold on floor and Carrara on wall")

    assert result.error is None
    assert result.parsed_intent.args.floor_tile_sku == "floor-calacatta-gold"
    assert result.parsed_intent.args.wall_tile_sku == "wall-carrara"
