"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from fileshare.configs.backend import BackendSettings
from fileshare.configs.base import AppSettings
from fileshare.configs.database import DatabaseSettings
from fileshare.configs.sharing import SharingSettings
from fileshare.configs.storage import StorageSettings


class Settings(AppSettings):
    """Application settings plus every collaborator config group."""

    backend: BackendSettings = Field(default_factory=BackendSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    sharing: SharingSettings = Field(default_factory=SharingSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from fileshare.configs import get_settings
        settings = get_settings()
    """
    return Settings()
