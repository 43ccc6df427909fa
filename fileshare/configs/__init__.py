"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from fileshare.configs.backend import BackendSettings, EnvCheck
from fileshare.configs.settings import Settings, get_settings

__all__ = ["BackendSettings", "EnvCheck", "Settings", "get_settings"]
