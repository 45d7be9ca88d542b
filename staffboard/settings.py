"""
staffboard.settings - Centralized Configuration

Single source of truth for all staffboard configuration.
Loads from .env files and environment variables using pydantic-settings.

Usage:
    >>> from staffboard.settings import get_settings
    >>> settings = get_settings()
    >>> settings.database_url
    'postgresql+asyncpg://localhost/staffboard_dev'
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StaffboardSettings(BaseSettings):
    """Centralized staffboard configuration loaded from .env / environment variables.

    All STAFFBOARD_* prefixed env vars are loaded automatically.
    Database and auth service credentials use standard names (no prefix) via aliases.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STAFFBOARD_",
        extra="ignore",
        populate_by_name=True,
    )

    # -- Environment -----------------------------------------------------------
    env: str = "development"

    # -- Database --------------------------------------------------------------
    database_url: str = Field(
        default="postgresql+asyncpg://localhost/staffboard_dev",
        alias="DATABASE_URL",
    )
    database_echo: bool = False

    # -- Hosted auth service ---------------------------------------------------
    auth_url: str = Field(default="http://localhost:54321/auth/v1", alias="AUTH_URL")
    auth_api_key: str | None = Field(default=None, alias="AUTH_API_KEY")
    auth_timeout_seconds: float = 30.0

    # Public URL of the dashboard, used for email redirect links.
    site_url: str = "http://localhost:3000"

    # -- API Server ------------------------------------------------------------
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # -- Rate limits -------------------------------------------------------------
    sign_in_max_requests: int = 10
    sign_in_window_seconds: int = 60
    password_reset_max_requests: int = 5
    password_reset_window_seconds: int = 300

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Validators ------------------------------------------------------------

    @field_validator("site_url", "auth_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    # -- Helpers ---------------------------------------------------------------

    @property
    def is_development(self) -> bool:
        """Return True when running in the development environment."""
        return self.env == "development"

    def auth_redirect_url(self, callback_type: str) -> str:
        """Build the auth callback URL embedded in signup/recovery emails."""
        return f"{self.site_url}/auth/callback?type={callback_type}"


# ---------------------------------------------------------------------------
# Singleton accessor
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_settings() -> StaffboardSettings:
    """Return the cached StaffboardSettings singleton."""
    return StaffboardSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
