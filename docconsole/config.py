"""
Configuration module for the docs console.
Loads settings from environment variables or .env file.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root (parent of docconsole/ directory)
_project_root = Path(__file__).parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


SEARCH_MODES = ("hybrid", "keyword", "semantic")


class Config:
    """Console configuration."""

    # Console API settings
    API_BASE_URL: str = os.getenv("CONSOLE_API_BASE_URL", "http://localhost:8080")
    API_KEY: str = os.getenv("CONSOLE_API_KEY", "")  # Sent as X-API-Key when set
    HTTP_TIMEOUT: float = float(os.getenv("CONSOLE_HTTP_TIMEOUT", "30.0"))

    # Search box
    SEARCH_DEBOUNCE_SECONDS: float = float(os.getenv("SEARCH_DEBOUNCE_SECONDS", "0.3"))
    SEARCH_MIN_QUERY_LENGTH: int = int(os.getenv("SEARCH_MIN_QUERY_LENGTH", "2"))
    SEARCH_LIMIT: int = int(os.getenv("SEARCH_LIMIT", "10"))
    SEARCH_DEFAULT_MODE: str = os.getenv("SEARCH_DEFAULT_MODE", "hybrid")

    # Release sync modal
    RELEASES_FETCH_LIMIT: int = int(os.getenv("RELEASES_FETCH_LIMIT", "20"))
    DEFAULT_DOCS_PATH: str = os.getenv("DEFAULT_DOCS_PATH", "docs")

    # Delays before the view reloads or navigates after a successful action
    RELOAD_DELAY_SECONDS: float = float(os.getenv("RELOAD_DELAY_SECONDS", "1.0"))
    NAVIGATE_DELAY_SECONDS: float = float(os.getenv("NAVIGATE_DELAY_SECONDS", "0.5"))

    # Notifications
    NOTIFICATION_DURATION_SECONDS: float = float(os.getenv("NOTIFICATION_DURATION_SECONDS", "3.0"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> None:
        """Validate console configuration."""
        if not cls.API_BASE_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"CONSOLE_API_BASE_URL must be an http(s) URL. "
                f"Current value: {cls.API_BASE_URL}"
            )

        if cls.SEARCH_DEFAULT_MODE.lower() not in SEARCH_MODES:
            raise ValueError(
                f"SEARCH_DEFAULT_MODE must be one of: {', '.join(SEARCH_MODES)}. "
                f"Got: {cls.SEARCH_DEFAULT_MODE}"
            )

        if cls.SEARCH_LIMIT < 1:
            raise ValueError(f"SEARCH_LIMIT must be positive. Got: {cls.SEARCH_LIMIT}")

        if cls.RELEASES_FETCH_LIMIT < 1:
            raise ValueError(
                f"RELEASES_FETCH_LIMIT must be positive. Got: {cls.RELEASES_FETCH_LIMIT}"
            )

        if cls.SEARCH_DEBOUNCE_SECONDS < 0:
            raise ValueError("SEARCH_DEBOUNCE_SECONDS cannot be negative")

    @classmethod
    def get_client_config(cls) -> dict:
        """Get keyword arguments for the console API client."""
        headers = {"Accept": "application/json"}
        if cls.API_KEY:
            headers["X-API-Key"] = cls.API_KEY

        return {
            "base_url": cls.API_BASE_URL.rstrip("/"),
            "timeout": cls.HTTP_TIMEOUT,
            "headers": headers,
        }


# Singleton config instance
config = Config()
