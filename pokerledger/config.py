"""Application configuration using Pydantic BaseSettings."""

import logging
import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("pokerledger.config")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS Configuration
    # Comma-separated list of allowed origins, or "*" for all origins
    CORS_ORIGINS: str = ""

    # Payment hand-off
    PAYMENT_LINK_BASE_URL: str = "https://venmo.com"
    PAYMENT_NOTE: str = "TL Online"

    # Request limits
    MAX_PLAYERS_PER_SESSION: int = 100

    # Application Metadata
    APP_VERSION: str = "1.0.0"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        """Normalize LOG_LEVEL, falling back to INFO for unknown names."""
        level = str(v or "").strip().upper()
        if level not in _LOG_LEVELS:
            logger.warning("Unknown LOG_LEVEL %r, using INFO", v)
            return "INFO"
        return level

    @field_validator("PAYMENT_LINK_BASE_URL", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def cors_origins(self) -> list[str]:
        """Return list of allowed CORS origins.

        If CORS_ORIGINS is empty, allows the local frontend dev servers
        but returns empty in production.
        """
        if self.CORS_ORIGINS:
            if self.CORS_ORIGINS == "*":
                return ["*"]
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

        is_production = os.getenv("RAILWAY_ENVIRONMENT") == "production"
        if is_production:
            logger.warning(
                "CORS_ORIGINS not configured in production. "
                "Set CORS_ORIGINS environment variable."
            )
            return []

        # Development defaults
        return [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]


# Global settings instance
settings = Settings()
