"""
Runtime Settings

Environment-driven configuration for the record store and the
resolution cache. Values are read from the process environment,
after loading a local .env file if one exists.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///standards.db"


class Settings(BaseModel):
    """Settings for one engine/gateway deployment."""
    database_url: str = Field(default=DEFAULT_DATABASE_URL)
    cache_ttl_seconds: float = Field(default=60.0, ge=0.0)
    cache_maxsize: int = Field(default=512, ge=1)


def get_settings() -> Settings:
    """
    Read settings from the environment.

    - STANDARDS_DATABASE_URL (falls back to DATABASE_URL)
    - STANDARDS_CACHE_TTL_SECONDS
    - STANDARDS_CACHE_MAXSIZE
    """
    return Settings(
        database_url=os.getenv("STANDARDS_DATABASE_URL")
        or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        cache_ttl_seconds=float(os.getenv("STANDARDS_CACHE_TTL_SECONDS", "60")),
        cache_maxsize=int(os.getenv("STANDARDS_CACHE_MAXSIZE", "512")),
    )
