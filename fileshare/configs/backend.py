"""
Managed backend configuration.

Resolves the service endpoint and public access key of the managed backend
(auth + storage + relational API). Each value is read from a primary
environment name and falls back to a secondary one. Empty values count as
unset, so an empty primary name still falls back.

Dependencies: pydantic, pydantic_settings
System role: Environment resolver for the backend client factory
"""

from dataclasses import dataclass, field

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fileshare.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class EnvCheck:
    """Result of checking the required backend variables."""

    is_complete: bool
    missing: list[str] = field(default_factory=list)


class BackendSettings(BaseSettings):
    """Endpoint and credentials of the managed backend service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    url: str = Field(
        default="",
        validation_alias=AliasChoices("PUBLIC_BACKEND_URL", "BACKEND_URL"),
        description="Managed backend service endpoint URL",
    )
    anon_key: str = Field(
        default="",
        validation_alias=AliasChoices("PUBLIC_BACKEND_ANON_KEY", "BACKEND_ANON_KEY"),
        description="Public (anonymous) access key sent with every backend call",
    )
    jwt_secret: str | None = Field(
        default=None,
        validation_alias=AliasChoices("BACKEND_JWT_SECRET"),
        description="Secret for verifying access tokens locally (remote lookup when unset)",
    )
    jwt_audience: str = Field(
        default="authenticated",
        validation_alias=AliasChoices("BACKEND_JWT_AUDIENCE"),
        description="Expected audience claim of access tokens",
    )
    request_timeout: float = Field(
        default=10.0,
        validation_alias=AliasChoices("BACKEND_REQUEST_TIMEOUT"),
        description="Timeout in seconds for calls to the auth service",
    )

    @property
    def auth_url(self) -> str:
        """Base URL of the auth REST API."""
        return f"{self.url.rstrip('/')}/auth/v1"

    def check_env_vars(self) -> EnvCheck:
        """
        Report which required backend variables are missing.

        Returns:
            EnvCheck: Completeness flag and the names of missing variables
        """
        missing = []
        if not self.url:
            missing.append("BACKEND_URL")
        if not self.anon_key:
            missing.append("BACKEND_ANON_KEY")
        return EnvCheck(is_complete=not missing, missing=missing)

    def ensure_complete(self) -> None:
        """
        Require both backend variables.

        Raises:
            ConfigurationError: Endpoint or key missing, names in `details["missing"]`
        """
        check = self.check_env_vars()
        if not check.is_complete:
            raise ConfigurationError(
                f"Missing backend configuration: {', '.join(check.missing)}",
                missing=check.missing,
            )
