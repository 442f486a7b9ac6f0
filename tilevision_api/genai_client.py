"""
Google GenAI client access.

Routes Gemini calls through Vertex AI (Cloud Run service account) when
GOOGLE_GENAI_USE_VERTEXAI is set, otherwise through the Gemini API key.
Vertex AI clients are kept per location: image generation models are served
from IMAGE_LOCATION ("global"), the intent model from GOOGLE_CLOUD_LOCATION.
Clients are created on first use so importing the app never needs credentials.
"""

import logging
from typing import Optional

from google import genai

from tilevision_api.config import config

logger = logging.getLogger(__name__)

_clients: dict[str, genai.Client] = {}


def create_genai_client(location: Optional[str] = None) -> genai.Client:
    """Build a GenAI client from the current configuration."""
    if config.GOOGLE_GENAI_USE_VERTEXAI:
        location = location or config.GOOGLE_CLOUD_LOCATION
        logger.info(
            f"Initializing GenAI client (Vertex AI, project: {config.GOOGLE_CLOUD_PROJECT}, location: {location})"
        )
        return genai.Client(
            vertexai=True,
            project=config.GOOGLE_CLOUD_PROJECT,
            location=location,
        )

    if not config.GOOGLE_API_KEY:
        raise RuntimeError("GOOGLE_API_KEY environment variable is required")

    logger.info("Initializing GenAI client (Gemini API)")
    return genai.Client(api_key=config.GOOGLE_API_KEY)


def get_genai_client(location: Optional[str] = None) -> genai.Client:
    """Get the GenAI client for a Vertex AI location (default: GOOGLE_CLOUD_LOCATION)."""
    location = location or config.GOOGLE_CLOUD_LOCATION
    # The Gemini API has no locations, one client serves every model
    key = location if config.GOOGLE_GENAI_USE_VERTEXAI else "gemini-api"
    if key not in _clients:
        _clients[key] = create_genai_client(location)
    return _clients[key]
