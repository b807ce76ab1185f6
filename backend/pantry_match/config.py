"""
Application configuration.

This module defines the application settings as a Pydantic model populated
from environment variables (a backend/.env file is loaded first, if present)
with type validation.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from typing import Optional
import os
from dotenv import load_dotenv

# Load .env from backend directory (works regardless of cwd when running uvicorn)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read an environment variable, treating empty strings as unset."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


class Settings(BaseModel):
    """
    Application configuration settings.

    Can be configured via environment variables or the backend/.env file.
    Environment variable names match the attribute names.

    Attributes:
        CATALOG_BASE_URL: Base URL of the recipe catalog API (unset = in-memory catalog)
        CATALOG_API_KEY: API key sent to the catalog API
        CATALOG_SEED_PATH: JSON seed file for the in-memory catalog
        API_TIMEOUT: Catalog request timeout in seconds
        CATALOG_MAX_RETRIES: Retry attempts for failed catalog requests
        RECOMMENDATION_TIMEOUT: Deadline for a whole ranking call in seconds
        SUBSTITUTION_WORKERS: Thread pool size for substitution lookups
        LOG_LEVEL: Logging level (DEBUG/INFO/WARNING/ERROR)
    """

    # Catalog Configuration
    CATALOG_BASE_URL: Optional[str] = Field(
        default_factory=lambda: _env("CATALOG_BASE_URL"),
        description="Base URL for the recipe catalog API"
    )

    CATALOG_API_KEY: Optional[str] = Field(
        default_factory=lambda: _env("CATALOG_API_KEY"),
        description="API key for the recipe catalog"
    )

    CATALOG_SEED_PATH: Optional[str] = Field(
        default_factory=lambda: _env(
            "CATALOG_SEED_PATH",
            str(Path(__file__).resolve().parent.parent / "data" / "sample_catalog.json"),
        ),
        description="JSON seed file for the in-memory catalog"
    )

    # API Timeouts
    API_TIMEOUT: int = Field(
        default_factory=lambda: int(_env("API_TIMEOUT", "10")),
        ge=1,
        le=60,
        description="Catalog request timeout in seconds"
    )

    CATALOG_MAX_RETRIES: int = Field(
        default_factory=lambda: int(_env("CATALOG_MAX_RETRIES", "3")),
        ge=0,
        le=10,
        description="Retry attempts for failed catalog requests"
    )

    # Ranking Configuration
    RECOMMENDATION_TIMEOUT: float = Field(
        default_factory=lambda: float(_env("RECOMMENDATION_TIMEOUT", "15")),
        gt=0,
        le=300,
        description="Deadline for a whole ranking call in seconds"
    )

    SUBSTITUTION_WORKERS: int = Field(
        default_factory=lambda: int(_env("SUBSTITUTION_WORKERS", "4")),
        ge=1,
        le=32,
        description="Thread pool size for substitution lookups"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default_factory=lambda: _env("LOG_LEVEL", "INFO"),
        description="Logging level (DEBUG/INFO/WARNING/ERROR)"
    )

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of: {', '.join(valid_levels)}"
            )
        return v_upper

    @field_validator('CATALOG_BASE_URL')
    @classmethod
    def validate_url(cls, v):
        """Ensure URLs are properly formatted."""
        if v is None:
            return v
        if not v.startswith(('http://', 'https://')):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip('/')  # Remove trailing slash


# Create global settings instance
settings = Settings()


# Configure logging based on settings
def configure_logging():
    """Configure application logging based on settings."""
    import logging

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured at {settings.LOG_LEVEL} level")
    if settings.CATALOG_BASE_URL:
        logger.info(f"Catalog URL: {settings.CATALOG_BASE_URL}")
    else:
        logger.info(f"Catalog: in-memory (seed: {settings.CATALOG_SEED_PATH})")


# Initialize logging on import
configure_logging()
