"""
Environment settings loader for the FastAPI application.
"""
from dataclasses import dataclass
from functools import lru_cache
import logging
import os

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable settings container built from environment variables."""
    unsplash_access_key: str | None
    request_timeout_seconds: float
    font_path: str | None
    frontend_origin: str
    enable_keyword_preview: bool
    log_level: int


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings built from environment variables."""
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()

    return Settings(
        # Empty string in .env counts as "not configured"
        unsplash_access_key=os.getenv("UNSPLASH_ACCESS_KEY") or None,
        request_timeout_seconds=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15")),
        font_path=os.getenv("PROMO_FONT_PATH") or None,
        frontend_origin=os.getenv("FRONTEND_ORIGIN", "http://localhost:3000"),
        enable_keyword_preview=os.getenv("ENABLE_KEYWORD_PREVIEW", "false").lower() == "true",
        log_level=getattr(logging, log_level_name, logging.INFO),
    )
