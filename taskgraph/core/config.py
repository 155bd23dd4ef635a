"""Application configuration using Pydantic Settings.

Environment variables are loaded from .env files and system environment.
"""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Task Graph API"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: Any) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return v
        return ["http://localhost:3000"]

    # Rules
    RULES_DIR: str = "rules"
    MAX_RULES_CHARS: int = Field(default=200_000, ge=1)

    # Layout (panel the circular layout is fitted into)
    LAYOUT_WIDTH: int = Field(default=800, ge=1)
    LAYOUT_HEIGHT: int = Field(default=600, ge=1)
    LAYOUT_MARGIN: int = Field(default=60, ge=0)
    LAYOUT_MIN_RADIUS: int = Field(default=50, ge=0)
    LAYOUT_NODE_SIZE: int = Field(default=40, ge=0)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None  # Defaults to logs/app.log
    LOG_JSON_FORMAT: bool = True  # Use JSON format for file logs


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are cached after first load.
    """
    return Settings()


# Global settings instance
settings = get_settings()
