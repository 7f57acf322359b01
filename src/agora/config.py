"""
Configuration management for Agora.

Handles environment variables and runtime settings for the trust and
disclosure core.
"""

from __future__ import annotations

import os
from enum import Enum
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseModel):
    """
    Application settings loaded from environment variables.

    These settings control logging, moderation and the HTTP surface.
    """

    # Runtime settings
    environment: Environment = Field(
        default_factory=lambda: Environment(os.getenv("ENVIRONMENT", "development")),
        description="Application environment",
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"),
        description="Logging level",
    )

    # Moderation settings
    moderation_enabled: bool = Field(
        default_factory=lambda: _env_flag("MODERATION_ENABLED", True),
        description="Reject write paths whose text fails the content filter",
    )

    # API settings
    api_token: Optional[str] = Field(
        default_factory=lambda: os.getenv("AGORA_API_TOKEN") or None,
        description="Service bearer token required by the HTTP surface, if set",
    )
    user_id_header: str = Field(
        default_factory=lambda: os.getenv("AGORA_USER_ID_HEADER", "X-User-Id"),
        description="Header carrying the user id authenticated upstream",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
