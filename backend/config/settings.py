"""
Application settings for the post settings service.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

PERSISTENT_DATA_PATH = "/var/data"


class AppSettings(NamedTuple):
    database_url: str
    posts_api_url: str
    slug_debounce_ms: int
    http_timeout: float
    log_level: str
    log_file: Optional[str]


def get_database_url() -> str:
    """
    Get the database URL based on environment.
    The persistent disk can be mounted at /var/data
    For local development, use the current directory
    """
    configured = os.getenv("DATABASE_URL")
    if configured:
        return configured

    if os.path.exists(PERSISTENT_DATA_PATH):
        db_path = os.path.join(PERSISTENT_DATA_PATH, "post_settings.db")
        return f"sqlite:///{db_path}"

    return "sqlite:///./post_settings.db"


def get_settings() -> AppSettings:
    """Read settings from the environment."""
    return AppSettings(
        database_url=get_database_url(),
        posts_api_url=os.getenv("POSTS_API_URL", "http://localhost:8000/api").rstrip("/"),
        slug_debounce_ms=int(os.getenv("SLUG_DEBOUNCE_MS", "700")),
        http_timeout=float(os.getenv("HTTP_TIMEOUT", "15")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE") or None,
    )
