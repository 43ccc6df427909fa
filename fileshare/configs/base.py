"""
Application-level settings.

Process-wide options of the file sharing service, read from `FILESHARE_`
variables: deployment environment, debug flag, log level and the origins
allowed to call the API from a browser.

Dependencies: pydantic, pydantic_settings
System role: Root of the aggregated Settings class
"""

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Service-wide settings shared by the API and the CLI entry points."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FILESHARE_",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    debug: bool = Field(
        default=False,
        description="Run FastAPI in debug mode",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level name",
    )
    cors_origins: list[str] = Field(
        default=["*"],
        description="Browser origins allowed to call the API (JSON list)",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept any casing, reject names the logging module does not know."""
        name = value.strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"Unknown log level: {value}")
        return name

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
