"""
fswatch Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Command-line flags override whatever is loaded here.
Requires Python 3.11+.
"""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fswatch import __version__

# Load .env from the current working directory so nested settings see it
load_dotenv()


class WatcherSettings(BaseSettings):
    """Event source configuration settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    debounce_interval: int = Field(
        default=2, ge=0, description="Coalescing window in seconds"
    )
    polling: bool = Field(default=False, description="Use the polling observer")
    polling_interval: float = Field(
        default=1.0, gt=0.0, description="Seconds between polling scans"
    )
    stop_timeout: float = Field(default=5.0, ge=0.0)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="WARNING")
    format: Literal["json", "console"] = Field(default="console")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept level names in any case."""
        return str(v).upper()


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="fswatch")
    app_version: str = Field(default=__version__)

    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings. Tests clear the cache
    with ``get_settings.cache_clear()`` after changing the environment.
    """
    return Settings()
