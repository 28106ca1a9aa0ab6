"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")
    log_to_file: bool = Field(default=False, description="Also write logs to logs/assurvie.log")

    # Fee simulator
    max_duration_years: int = Field(default=40, ge=1, le=100)

    # CLI output
    result_precision: int = Field(default=2, ge=0, le=10, description="Decimals kept in JSON output")

    model_config = {
        "env_prefix": "ASSURVIE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
