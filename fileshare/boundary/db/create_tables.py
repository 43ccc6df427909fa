"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, fileshare.configs
System role: Database schema initialization

Usage:
    python -m fileshare.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from fileshare.boundary.db.base import Base
from fileshare.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from fileshare.boundary.db.models.file_model import FileModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: issues CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Args:
        engine: Engine to use (built from settings when None)

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created", extra={"tables": sorted(Base.metadata.tables)})


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.

    Args:
        engine: Engine to use (built from settings when None)
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Tables dropped")


def main() -> None:
    """Create the schema on the configured database."""
    from fileshare.observability.logger import configure_logging

    configure_logging()

    async def run() -> None:
        engine = get_async_engine()
        try:
            await create_all_tables(engine)
        finally:
            await engine.dispose()

    asyncio.run(run())


if __name__ == "__main__":
    main()
