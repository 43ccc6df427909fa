"""
Health check API endpoints.

Routes: GET /health, GET /test-connection

Dependencies: fileshare.api.deps, fileshare.boundary, sqlalchemy
System role: Liveness and backend connectivity checks
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from fileshare.api.deps import get_backend, get_settings_dependency
from fileshare.boundary.backend import Backend
from fileshare.boundary.db.models.file_model import FileModel
from fileshare.configs import Settings
from fileshare.core.exceptions import FileShareException
from fileshare.models.connection import ConnectionTestResponse, EnvVarsPresent

logger = logging.getLogger(__name__)

# Missing-table messages of PostgreSQL and SQLite
_MISSING_TABLE_MARKERS = ("does not exist", "no such table")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])
connection_router = APIRouter(tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@connection_router.get("/test-connection", response_model=ConnectionTestResponse)
async def test_connection(
    settings: Settings = Depends(get_settings_dependency),
    backend: Backend = Depends(get_backend),
) -> ConnectionTestResponse:
    """
    Report backend configuration and connectivity.

    Checks, in order:
    1. Backend URL and public key are configured
    2. The auth service answers
    3. The files table can be queried (a missing table still counts as
       connected)

    Never fails: every problem is reported in the response body.
    """
    env_check = settings.backend.check_env_vars()
    report = ConnectionTestResponse(
        env_vars=EnvVarsPresent(
            backend_url=bool(settings.backend.url),
            backend_anon_key=bool(settings.backend.anon_key),
        ),
        missing=env_check.missing,
        connection_status="success",
    )

    try:
        await backend.auth.check_health()
    except FileShareException as e:
        logger.warning("Auth service check failed", extra={"error": e.message})
        report.connection_status = "error"
        report.error_message = f"Auth service error: {e.message}"
        return report

    try:
        async with backend.session_factory() as session:
            await session.execute(select(FileModel.id).limit(1))
        report.db_query_status = "success"
    except SQLAlchemyError as e:
        message = str(e)
        if any(marker in message for marker in _MISSING_TABLE_MARKERS):
            report.db_query_status = "success"
        else:
            logger.warning("Database check failed", extra={"error": message})
            report.db_query_status = "error"
            report.db_query_error = f"Database error: {message}"

    return report
