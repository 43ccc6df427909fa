"""
Backend client factory.

Builds the single handle through which the application reaches the managed
backend: auth (session retrieval), object storage (keyed blobs) and the
relational store (file metadata, including the atomic download counter).
The handle is created once per application and injected where needed.

Dependencies: boto3, httpx, sqlalchemy, fileshare.configs
System role: Composition root for external collaborators
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from fileshare.boundary.auth.auth_client import AuthClient
from fileshare.boundary.aws.s3_client import S3FileStore
from fileshare.boundary.db.connection import get_async_engine, get_async_session_factory
from fileshare.boundary.db.CRUD.file_crud import FileCRUD, file_crud
from fileshare.configs import Settings, get_settings
from fileshare.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class Backend:
    """
    Capabilities of the managed backend.

    Attributes:
        auth: Session retrieval, sign-in/up/out and refresh
        storage: Keyed blob put/open/remove
        session_factory: Async sessions against the relational store
        files: Insert/select/update/delete on file records, plus the
            atomic download increment
        engine: Engine behind session_factory (None when injected without one)
    """

    auth: AuthClient
    storage: S3FileStore
    session_factory: async_sessionmaker
    files: FileCRUD = field(default=file_crud)
    engine: AsyncEngine | None = None

    async def close(self) -> None:
        """Release HTTP connections and the database pool."""
        await self.auth.close()
        if self.engine is not None:
            await self.engine.dispose()


def create_backend(settings: Settings | None = None) -> Backend:
    """
    Construct a backend handle bound to the resolved configuration.

    Missing endpoint or key is logged but does not stop construction;
    calls will fail later with a connection error instead.

    Args:
        settings: Application settings (cached settings when None)

    Returns:
        Backend: Ready-to-use backend handle
    """
    settings = settings or get_settings()

    try:
        settings.backend.ensure_complete()
    except ConfigurationError as e:
        logger.warning(
            "Backend configuration incomplete, backend calls will fail",
            extra={"missing": e.details["missing"], "error_type": type(e).__name__, "error_msg": e.message},
        )

    storage = S3FileStore(
        bucket=settings.storage.bucket,
        region=settings.storage.region,
        endpoint_url=settings.storage.resolve_endpoint(settings.backend.url),
        cache_control=settings.storage.cache_control,
    )
    engine = get_async_engine(settings.database)

    logger.info(
        "Backend client created",
        extra={"bucket": settings.storage.bucket, "auth_url": settings.backend.auth_url},
    )

    return Backend(
        auth=AuthClient(settings.backend),
        storage=storage,
        session_factory=get_async_session_factory(engine),
        engine=engine,
    )
