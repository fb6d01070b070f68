"""Configuration management with pydantic-settings.

Provides type-safe configuration with environment variable validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Pricing ===
    currency_symbol: str = Field("£", description="Currency symbol used in offer labels")
    pricing_strict_inputs: bool = Field(
        False, description="Reject negative prices and non-integral quantities"
    )
    offers_strict_parsing: bool = Field(
        False, description="Fail on malformed offer payloads instead of skipping them"
    )

    # === Logging ===
    log_level: str = Field("INFO", description="Root log level")
    log_to_stdout: bool = Field(True, description="Emit JSON logs to stdout")
    log_file_path: str | None = Field(None, description="Path to JSON log file (None disables)")
    log_max_bytes: int = Field(5 * 1024 * 1024, description="Log file size before rotation")
    log_backup_count: int = Field(5, description="Number of rotated log files to keep")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        RuntimeError: If an environment variable holds an invalid value.

    """
    try:
        return Settings()
    except ValidationError as e:
        bad_fields = [str(error["loc"][0]).upper() for error in e.errors() if error["loc"]]

        error_msg = (
            f"Configuration error: invalid environment variables: "
            f"{', '.join(bad_fields)}\n"
            f"Please fix them in .env file or the process environment."
        )
        raise RuntimeError(error_msg) from e


__all__ = ["Settings", "get_settings"]
