"""API-specific dependencies."""

from .dependencies import (
    get_async_db,
    get_auth_client,
    get_backend,
    get_current_identity,
    get_file_service,
    get_optional_identity,
    get_settings_dependency,
)

__all__ = [
    "get_async_db",
    "get_auth_client",
    "get_backend",
    "get_current_identity",
    "get_file_service",
    "get_optional_identity",
    "get_settings_dependency",
]
