"""
Configuration management for NutriCart.

This module centralizes environment variable loading from .env file at project root.
It should be imported early in both backend (api/main.py) and frontend (streamlit_app/app.py)
to ensure .env is loaded before any other code accesses environment variables.

In production, .env will not exist, but load_dotenv() is safe to call and will no-op.
Environment variables from the hosting platform will be used instead.

Environment Variables:
- EDAMAM_APP_ID: Required for recipe search (Edamam application id)
- EDAMAM_APP_KEY: Required for recipe search (Edamam application key)
- EDAMAM_BASE_URL: Optional, defaults to "https://api.edamam.com"
- USDA_API_KEY: Optional, defaults to "DEMO_KEY" (rate-limited)
- USDA_BASE_URL: Optional, defaults to "https://api.nal.usda.gov/fdc/v1"
- SEARCH_PAGE_SIZE: Optional, results per page (default: 10)
- SEARCH_LIMIT: Optional, result ceiling per query (default: 100)
- HTTP_TIMEOUT_SECONDS: Optional, timeout for upstream calls (default: 15)
- DATABASE_URL: Optional, enables SQL-backed profiles and events
- BACKEND_URL: Optional, backend URL (defaults to http://localhost:8000 for local dev)
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    This function locates the project root by going up from this file's location
    (api/config.py -> project root) and loads .env if it exists.

    Safe to call multiple times. Where .env doesn't exist this is a no-op and
    platform environment variables will be used.
    """
    # Get project root: api/config.py -> api/ -> project root
    project_root = Path(__file__).resolve().parent.parent
    env_path = project_root / ".env"

    # override=False means existing env vars take precedence
    load_dotenv(env_path, override=False)


# Load .env file on module import
load_env_file()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


class EdamamConfig:
    """Configuration for the Edamam recipe search connector."""

    @staticmethod
    def get_app_id() -> Optional[str]:
        """
        Get Edamam application id from environment.

        Returns:
            App id string or None if not set

        Note:
            This does not raise an error - the connector validates its own credentials.
        """
        return os.getenv("EDAMAM_APP_ID")

    @staticmethod
    def get_app_key() -> Optional[str]:
        """Get Edamam application key from environment (None if not set)."""
        return os.getenv("EDAMAM_APP_KEY")

    @staticmethod
    def get_base_url() -> str:
        return os.getenv("EDAMAM_BASE_URL", "https://api.edamam.com")


class UsdaConfig:
    """Configuration for the USDA FoodData Central connector."""

    @staticmethod
    def get_api_key() -> str:
        """
        Get USDA API key.

        Returns:
            API key string (default: "DEMO_KEY")
        """
        return os.getenv("USDA_API_KEY", "DEMO_KEY")

    @staticmethod
    def get_base_url() -> str:
        return os.getenv("USDA_BASE_URL", "https://api.nal.usda.gov/fdc/v1")


class SearchConfig:
    """Pagination settings shared by the recipe and grocery searches."""

    @staticmethod
    def get_page_size() -> int:
        """Results per page (default: 10)."""
        return max(1, _int_env("SEARCH_PAGE_SIZE", 10))

    @staticmethod
    def get_search_limit() -> int:
        """
        Result ceiling per query (default: 100).

        The number of pages of every query is search_limit // page_size.
        """
        return max(0, _int_env("SEARCH_LIMIT", 100))

    @staticmethod
    def get_timeout_seconds() -> int:
        return max(1, _int_env("HTTP_TIMEOUT_SECONDS", 15))


def get_backend_url() -> str:
    """Backend URL used by the Streamlit frontend."""
    return os.getenv("BACKEND_URL", "http://localhost:8000").rstrip("/")


def get_required_env_vars() -> dict:
    """
    Get a dictionary of all required environment variables and their status.

    Returns:
        Dictionary with keys:
        - edamam_app_id: bool (True if set)
        - edamam_app_key: bool (True if set)
        - usda_api_key: bool (True if a non-demo key is set)
        - database_url: bool (True if set)
    """
    return {
        "edamam_app_id": EdamamConfig.get_app_id() is not None,
        "edamam_app_key": EdamamConfig.get_app_key() is not None,
        "usda_api_key": UsdaConfig.get_api_key() != "DEMO_KEY",
        "database_url": bool(os.getenv("DATABASE_URL")),
    }


def validate_required_config() -> None:
    """
    Validate that all required environment variables are set.

    Raises:
        RuntimeError: If any required configuration is missing

    Note:
        This is a convenience function. Connectors also validate their own
        required configuration and raise ConfigError if missing.
    """
    missing = []

    if not EdamamConfig.get_app_id():
        missing.append("EDAMAM_APP_ID (required for recipe search)")

    if not EdamamConfig.get_app_key():
        missing.append("EDAMAM_APP_KEY (required for recipe search)")

    if missing:
        raise RuntimeError(
            "Missing required environment variables:\n" +
            "\n".join(f"  - {var}" for var in missing) +
            "\n\nPlease create a .env file at the project root with these variables."
        )
