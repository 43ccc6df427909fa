"""
FastAPI application with assembled routers.

Initializes FastAPI app with all routers and middleware and configures
uvicorn server.

Dependencies: fastapi, fileshare.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fileshare.api.middleware import AccessGateMiddleware
from fileshare.boundary.backend import Backend, create_backend
from fileshare.configs import Settings, get_settings
from fileshare.observability.logger import configure_logging
from fileshare.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    auth_router,
    connection_router,
    dashboard_router,
    download_router,
    health_router,
    home_router,
    upload_router,
)

logger = logging.getLogger(__name__)


def create_app(backend: Backend | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        backend: Backend handle to use (created at startup when None)
        settings: Application settings (cached settings when None)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan context manager.

        Handles startup and shutdown events.
        """
        configure_logging(settings.log_level)

        owns_backend = app.state.backend is None
        if owns_backend:
            app.state.backend = create_backend(settings)
        logger.info("Application started", extra={"environment": settings.environment})

        yield

        if owns_backend:
            await app.state.backend.close()
            app.state.backend = None
        logger.info("Application stopped")

    app = FastAPI(
        title="FileShare API",
        description="Upload files and share them through unique links",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.backend = backend

    # Last added runs first: CORS, correlation id, request log, access gate.
    # Preflights carry no session cookie and must be answered before the gate.
    app.add_middleware(AccessGateMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(home_router)
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(upload_router)
    app.include_router(download_router)
    app.include_router(connection_router)
    app.include_router(health_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "fileshare.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
