"""
Application settings using pydantic-settings for type-safe configuration.

All environment variables are centralized here with proper typing, validation,
and sensible defaults. Settings are loaded once at startup and cached.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local development.
    Production values should be set via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars not defined here
        case_sensitive=False,
    )

    app_name: str = Field(
        default="Dormitory API",
        description="Title shown in the OpenAPI docs",
    )

    # === CORS Configuration ===
    # Note: Use str type for env var parsing, convert to list via property
    allowed_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="ALLOWED_ORIGINS",
        description="Allowed CORS origins (comma-separated)",
    )

    # === Logging ===
    log_level: str = Field(
        default="INFO",
        description="Root log level: TRACE, DEBUG, INFO, WARNING or ERROR",
    )

    # === Engine Settings ===
    assignment_random_seed: int | None = Field(
        default=None,
        description="Seed for the RANDOM strategy when a request carries none (engine config default otherwise)",
    )
    save_run_logs: bool = Field(
        default=False,
        description="Write each preview run's assignment log to the engine log directory",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Parse comma-separated origins string into list."""
        return [origin.strip() for origin in self.allowed_origins_str.split(",") if origin.strip()]

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log_level."""
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid LOG_LEVEL: {v}. Must be one of {', '.join(VALID_LOG_LEVELS)}")
        return v

    @field_validator("assignment_random_seed", mode="after")
    @classmethod
    def validate_seed(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"ASSIGNMENT_RANDOM_SEED must be non-negative, got {v}")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the application.
    Use this function to access settings throughout the codebase.
    """
    return Settings()
