"""Configuration helpers for database, scraper and runtime settings."""

from __future__ import annotations

import logging
import os
from typing import List, Optional
from urllib.parse import urlsplit

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

DEFAULT_DATABASE_NAME = "jewelry_catalog"


def _load_env_file() -> None:
    """Load variables from a local ``.env`` file when available."""

    env_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env")
    if not os.path.exists(env_path):
        LOGGER.debug("No .env file found at %s", env_path)
        return

    load_dotenv(env_path)
    LOGGER.info("Loaded environment variables from %s", env_path)


def _split_list(raw: str) -> List[str]:
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


def database_name_from_uri(uri: Optional[str]) -> Optional[str]:
    """Return the database named in the path of a MongoDB URI, if any."""

    if not uri:
        return None

    try:
        path = urlsplit(uri).path
    except ValueError:
        return None

    name = path.lstrip("/").split("/")[-1]
    return name or None


_load_env_file()


class Config:
    """Central access point for runtime configuration."""

    # MongoDB ------------------------------------------------------------------
    MONGODB_URI: Optional[str] = os.getenv("MONGODB_URI")
    MONGODB_DB: Optional[str] = os.getenv("MONGODB_DB")

    # Rates scraper ------------------------------------------------------------
    RATES_CACHE_MINUTES: int = int(os.getenv("RATES_CACHE_MINUTES", "60"))
    RATES_SOURCES: List[str] = _split_list(os.getenv("RATES_SOURCES", "headline,price_band"))
    REQUEST_TIMEOUT_SECONDS: int = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
    )

    # Catalog ------------------------------------------------------------------
    COLLECTION_LIMIT: int = int(os.getenv("COLLECTION_LIMIT", "10"))

    # HTTP ---------------------------------------------------------------------
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Feature flags ------------------------------------------------------------
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def get_database_name(cls) -> str:
        """Return the configured database name, falling back to the URI path."""

        return cls.MONGODB_DB or database_name_from_uri(cls.MONGODB_URI) or DEFAULT_DATABASE_NAME

    @classmethod
    def validate(cls) -> bool:
        """Validate that the active configuration is usable."""

        if not cls.MONGODB_URI:
            LOGGER.warning("MONGODB_URI is not set - catalog endpoints will be unavailable")
            return False
        return True
