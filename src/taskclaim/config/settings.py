"""
Pydantic settings model for taskclaim configuration.

This module defines the configuration schema using pydantic-settings for
validation and environment variable loading.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="TASKCLAIM_LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format (text or json)")
    dir: Optional[Path] = Field(default=None, description="Directory for JSONL log files")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = ["text", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}")
        return v.lower()


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TASKCLAIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    store_path: Path = Field(
        default=Path(".claims/task-claims.json"), description="Claim store file"
    )
    registry_path: Optional[Path] = Field(
        default=None, description="JSON task registry with effort estimates"
    )
    default_effort_minutes: int = Field(
        default=120, gt=0, description="Effort assumed for tasks without an estimate"
    )
    lease_multiplier: int = Field(
        default=2, gt=0, description="Lease length as a multiple of the effort"
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
