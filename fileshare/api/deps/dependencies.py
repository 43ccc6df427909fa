"""
Dependency injection container.

Factory functions for FastAPI dependencies. The backend handle and settings
live on `app.state` (set by the application lifespan or injected by tests);
everything per-request is derived from them.

Dependencies: fileshare.configs, fileshare.application, fileshare.boundary
System role: DI container for service injection
"""

from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from fileshare.application.services import FileService
from fileshare.boundary.auth import AuthClient
from fileshare.boundary.backend import Backend
from fileshare.configs import Settings, get_settings
from fileshare.core.session_store import Identity
from fileshare.models.common import Notification


def get_settings_dependency(request: Request) -> Settings:
    """Get the settings the application was created with."""
    settings = getattr(request.app.state, "settings", None)
    return settings or get_settings()


def get_backend(request: Request) -> Backend:
    """
    Get the backend handle created at startup.

    Raises:
        HTTPException(503): Application started without a backend
    """
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=Notification.error("Error", "Backend is not initialized").model_dump(),
        )
    return backend


async def get_async_db(
    backend: Backend = Depends(get_backend),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an async database session for the request.

    Args:
        backend: Injected backend handle

    Yields:
        AsyncSession: Session closed when the request ends
    """
    async with backend.session_factory() as session:
        yield session


def get_auth_client(backend: Backend = Depends(get_backend)) -> AuthClient:
    """Get the auth service client."""
    return backend.auth


def get_file_service(
    db: AsyncSession = Depends(get_async_db),
    backend: Backend = Depends(get_backend),
    settings: Settings = Depends(get_settings_dependency),
) -> FileService:
    """
    Get file service instance.

    Args:
        db: Async database session (injected via Depends)
        backend: Backend handle providing storage and file CRUD
        settings: Application settings

    Returns:
        FileService: File registry bound to this request's session
    """
    return FileService(
        db=db,
        storage=backend.storage,
        files=backend.files,
        share_key_length=settings.sharing.share_key_length,
    )


def get_optional_identity(request: Request) -> Identity | None:
    """Identity resolved by the access gate middleware, if any."""
    return getattr(request.state, "session", None)


def get_current_identity(
    identity: Identity | None = Depends(get_optional_identity),
) -> Identity:
    """
    Require a present session.

    The access gate already redirects anonymous requests away from protected
    views; this covers routes mounted outside the protected prefixes.

    Raises:
        HTTPException(401): No session on the request
    """
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=Notification.error("Error", "You must be logged in").model_dump(),
        )
    return identity
