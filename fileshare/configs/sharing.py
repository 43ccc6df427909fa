"""
Sharing configuration settings.

Share-link origin, share key length, session cookie and download streaming
options.

Dependencies: pydantic, pydantic_settings
System role: File sharing behaviour configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SharingSettings(BaseSettings):
    """Settings for share links and downloads."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FILESHARE_",
        case_sensitive=False,
        extra="ignore",
    )

    public_origin: str | None = Field(
        default=None,
        description="Origin used in share links (request base URL when unset)",
    )
    share_key_length: int = Field(
        default=10,
        ge=10,
        le=64,
        description="Number of characters in generated share keys",
    )
    download_chunk_size: int = Field(
        default=64 * 1024,
        gt=0,
        description="Chunk size in bytes when streaming blobs to clients",
    )
    session_cookie_name: str = Field(
        default="fileshare-access-token",
        description="Cookie carrying the access token",
    )
    refresh_cookie_name: str = Field(
        default="fileshare-refresh-token",
        description="Cookie carrying the refresh token",
    )
    secure_cookies: bool = Field(
        default=False,
        description="Mark session cookies as Secure (HTTPS only)",
    )
