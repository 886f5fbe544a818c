"""Configuration management for PadGroups.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once and is
immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PADGROUPS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "PadGroups"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Store Settings
    store_backend: Literal["sql", "memory"] = "sql"
    database_url: str = "sqlite+aiosqlite:///./padgroups.db"
    db_echo: bool = False
    group_prefix: str = Field(
        default="mypads:group:",
        description="Key prefix reserved for group records",
    )

    # Group Operation Settings
    index_concurrency: int = Field(
        default=16,
        description="Maximum concurrent user back-reference updates per operation",
    )
    existence_check_concurrency: int = Field(
        default=32,
        description="Maximum concurrent store lookups when checking references",
    )
    operation_timeout_seconds: float | None = Field(
        default=30.0,
        description="Upper bound for a whole create/update/delete call (None disables it)",
    )
    compensate_on_failure: bool = Field(
        default=False,
        description="Detach already-attached users when attach propagation fails on create",
    )

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("index_concurrency", "existence_check_concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        """Concurrency limits must allow at least one in-flight request."""
        if v < 1:
            raise ValueError("Concurrency limit must be at least 1")
        return v

    @field_validator("operation_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        """Timeouts must be positive when set."""
        if v is not None and v <= 0:
            raise ValueError("Operation timeout must be positive")
        return v

    @field_validator("group_prefix")
    @classmethod
    def validate_group_prefix(cls, v: str) -> str:
        """An empty prefix would let group keys collide with user and pad keys."""
        if not v:
            raise ValueError("Group prefix cannot be empty")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
