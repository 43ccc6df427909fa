"""
Object storage configuration.

Settings for the bucket holding uploaded file blobs.

Dependencies: pydantic_settings
System role: Storage bucket configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Settings for blob storage operations."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="files",
        description="Bucket holding uploaded file blobs",
    )
    region: str = Field(
        default="us-east-1",
        description="Region of the storage bucket",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="S3-compatible endpoint (defaults to the backend storage API)",
    )
    cache_control: str = Field(
        default="max-age=3600",
        description="Cache-Control header stored with each blob",
    )

    def resolve_endpoint(self, backend_url: str) -> str | None:
        """
        Work out which S3 endpoint to talk to.

        Args:
            backend_url: Managed backend endpoint URL (may be empty)

        Returns:
            str | None: Explicit endpoint, the backend's S3 gateway, or None for AWS
        """
        if self.endpoint_url:
            return self.endpoint_url
        if backend_url:
            return f"{backend_url.rstrip('/')}/storage/v1/s3"
        return None
