"""
Configuration module for the TileVision application.

Loads environment variables and provides centralized configuration access.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    # Google Cloud (only used when routing Gemini calls through Vertex AI)
    GOOGLE_CLOUD_PROJECT: str = os.getenv("GOOGLE_CLOUD_PROJECT", "")
    GOOGLE_CLOUD_LOCATION: str = os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1")
    # Image generation models are served from the global endpoint
    IMAGE_LOCATION: str = os.getenv("IMAGE_LOCATION", "global")
    GOOGLE_GENAI_USE_VERTEXAI: bool = _env_flag("GOOGLE_GENAI_USE_VERTEXAI")

    # Gemini API key (used when Vertex AI is disabled)
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")

    # Gemini models
    INTENT_MODEL: str = os.getenv("INTENT_MODEL", "gemini-2.5-flash")
    IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image-preview")

    # Tile catalog (bundled with the package by default)
    PACKAGE_ROOT: Path = Path(__file__).parent
    CATALOG_PATH: Path = Path(os.getenv("CATALOG_PATH", str(PACKAGE_ROOT / "data" / "tiles.json")))

    # Cloud Run / Service Config
    PORT: int = int(os.getenv("PORT", "8080"))
    CORS_ORIGINS: list[str] = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    @classmethod
    def validate(cls) -> None:
        """Validate that required configuration is present."""
        if cls.GOOGLE_GENAI_USE_VERTEXAI and not cls.GOOGLE_CLOUD_PROJECT:
            raise ValueError("GOOGLE_CLOUD_PROJECT environment variable is required for Vertex AI")

        if not cls.GOOGLE_GENAI_USE_VERTEXAI and not cls.GOOGLE_API_KEY:
            raise ValueError("GOOGLE_API_KEY environment variable is required")

        if not cls.CATALOG_PATH.exists():
            raise ValueError(f"Tile catalog not found: {cls.CATALOG_PATH}")


# Singleton instance
config = Config()
