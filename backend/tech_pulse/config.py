"""
Application configuration with environment variable support.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings, read from the environment or a local .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upstream API
    HN_API_BASE: str = Field(
        default="https://hacker-news.firebaseio.com/v0",
        description="Base URL of the Hacker News API",
    )
    HN_ITEM_URL: str = Field(
        default="https://news.ycombinator.com/item?id=",
        description="Prefix of the public discussion page for an item",
    )

    # HTTP client
    USER_AGENT: str = "tech-pulse-agent/1.0"
    REQUEST_TIMEOUT: Optional[float] = Field(
        default=None, description="Per-request timeout in seconds (None disables it)"
    )

    # Fan-out
    MAX_CONCURRENCY: Optional[int] = Field(
        default=None, ge=1, description="Maximum in-flight item requests per batch"
    )
    SKIP_FAILED_ITEMS: bool = Field(
        default=False,
        description="Treat a failed item request as an absent item instead of failing the batch",
    )
    MAX_STORIES_PER_CATEGORY: int = Field(default=30, ge=1)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @property
    def http_headers(self) -> dict[str, str]:
        return {"User-Agent": self.USER_AGENT, "Accept": "application/json"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply LOG_LEVEL and LOG_FORMAT to the root logger."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
