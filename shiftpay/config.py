"""
shiftpay Configuration

Environment-based settings for the attendance-driven compensation engines.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "shiftpay"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Shift pairing
    duplicate_in_threshold_minutes: int = Field(
        default=60,
        ge=0,
        description="Minimum gap between two kept IN punches",
    )
    max_shifts_per_day: int = Field(default=3, ge=1)
    pairing_window_hours: int = Field(
        default=24,
        ge=1,
        description="Maximum distance between an IN and the OUT it pairs with",
    )
    local_timezone: str | None = Field(
        default=None,
        description="IANA zone used to read the calendar date of aware punches (system zone if unset)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
