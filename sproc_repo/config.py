"""Configuration management using Pydantic Settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepositorySettings(BaseSettings):
    """Repository settings loaded from `SPROC_*` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPROC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    connection_string: str = ""
    dialect: Literal["mssql", "postgres"] = "mssql"
    # Login timeout in seconds, handed to the driver on connect.
    connect_timeout: Optional[float] = Field(default=None, gt=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"


_settings: RepositorySettings | None = None


def get_settings() -> RepositorySettings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = RepositorySettings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
