"""Configuration settings management for ToDone.

This module provides hierarchical configuration using pydantic-settings with
field validation and environment variable support.

Features:
- Nested BaseSettings sections for database, appearance and analytics
- Environment variable support with TODONE_ prefix and ``__`` nesting
- Support for .env files
- Cached global settings instance
"""

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .schemas.models import AccentColor, AppTheme


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DatabaseSettings(BaseSettings):
    """Database configuration for the task store."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    path: Path = Field(
        Path.home() / ".todone" / "todone.db",
        description="SQLite database file path",
    )
    echo_sql: bool = Field(False, description="Enable SQL query logging for debugging")

    @field_validator("path")
    @classmethod
    def validate_db_path(cls, v: Path) -> Path:
        """Ensure database directory exists and is writable."""
        v = v.expanduser()
        if not v.is_absolute():
            v = Path.cwd() / v

        v.parent.mkdir(parents=True, exist_ok=True)

        if not os.access(v.parent, os.W_OK):
            raise ValueError(f"Database directory is not writable: {v.parent}")

        return v


class AppearanceSettings(BaseSettings):
    """Defaults used when the settings store holds no appearance preference."""

    model_config = SettingsConfigDict(env_prefix="APPEARANCE_")

    default_theme: AppTheme = Field(AppTheme.SYSTEM, description="Fallback colour scheme")
    default_accent_color: AccentColor = Field(
        AccentColor.GREEN, description="Fallback accent colour"
    )


class AnalyticsSettings(BaseSettings):
    """Settings for the aggregate statistics views."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    window_days: int = Field(
        7, ge=1, le=31, description="Number of days shown in the weekly progress chart"
    )
    bucket_by_completion_time: bool = Field(
        False,
        description="Attribute completed tasks to the day they were completed "
        "instead of the day they were created",
    )


class TodoneSettings(BaseSettings):
    """Root configuration combining all subsystem settings."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    appearance: AppearanceSettings = Field(default_factory=AppearanceSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)

    debug_mode: bool = Field(False, description="Enable debug logging")
    log_level: str = Field(
        "WARNING", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    config_version: str = Field("1.0.0", description="Configuration schema version")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_prefix="TODONE_",
        extra="ignore",
        validate_default=True,
        case_sensitive=False,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and check the logging level name."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def effective_log_level(self) -> int:
        """Numeric logging level, forced to DEBUG in debug mode."""
        if self.debug_mode:
            return logging.DEBUG
        return logging.getLevelName(self.log_level)


@lru_cache(maxsize=1)
def get_settings() -> TodoneSettings:
    """Get cached global settings instance.

    Returns:
        Global TodoneSettings instance

    """
    return TodoneSettings()


def get_database_url() -> str:
    """Get the SQLite URL for the configured database file."""
    return f"sqlite:///{get_settings().database.path}"


__all__ = [
    "AnalyticsSettings",
    "AppearanceSettings",
    "DatabaseSettings",
    "TodoneSettings",
    "get_database_url",
    "get_settings",
]
