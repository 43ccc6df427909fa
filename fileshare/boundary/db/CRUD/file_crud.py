"""
File CRUD operations.

Provides Create, Read, Update, Delete operations for FileModel with
owner-scoped queries, share key lookup and the atomic download counter.

Dependencies: sqlalchemy, fileshare.boundary.db.models.file_model
System role: File metadata persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fileshare.boundary.db.CRUD.base_crud import BaseCRUD
from fileshare.boundary.db.models.file_model import FileModel


class FileCRUD(BaseCRUD[FileModel]):
    """
    CRUD operations for FileModel.

    Owner-scoped methods filter on user_id the way the backend's row access
    policy would, so one user can never list or delete another's records.
    """

    def __init__(self) -> None:
        """Initialize FileCRUD with FileModel."""
        super().__init__(FileModel)

    async def get_by_unique_key(
        self,
        session: AsyncSession,
        unique_key: str,
    ) -> FileModel | None:
        """
        Retrieve the record a share key points to.

        Args:
            session: Async database session
            unique_key: Share key from a download link

        Returns:
            FileModel if the key was issued, None otherwise
        """
        stmt = select(FileModel).where(FileModel.unique_key == unique_key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(
        self,
        session: AsyncSession,
        id: UUID,
        user_id: str,
    ) -> FileModel | None:
        """
        Retrieve a record only if it belongs to `user_id`.

        Args:
            session: Async database session
            id: File UUID
            user_id: Requesting identity

        Returns:
            FileModel if found and owned, None otherwise
        """
        record = await self.get_by_id(session, id)
        if record is None or record.user_id != user_id:
            return None
        return record

    async def get_by_user_id(
        self,
        session: AsyncSession,
        user_id: str,
    ) -> Sequence[FileModel]:
        """
        Retrieve every record owned by a user, newest first.

        Args:
            session: Async database session
            user_id: Owning identity

        Returns:
            Sequence of FileModels ordered by created_at descending
        """
        stmt = (
            select(FileModel)
            .where(FileModel.user_id == user_id)
            .order_by(FileModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def increment_downloads(self, session: AsyncSession, id: UUID) -> bool:
        """
        Add one to the download counter inside the database.

        The new value is computed by the UPDATE expression itself, so
        concurrent downloads cannot overwrite each other's increments.

        Args:
            session: Async database session
            id: File UUID

        Returns:
            True if a row was updated, False if the record is gone
        """
        stmt = (
            update(FileModel)
            .where(FileModel.id == id)
            .values(downloads=FileModel.downloads + 1)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def delete_owned(
        self,
        session: AsyncSession,
        id: UUID,
        user_id: str,
    ) -> bool:
        """
        Delete a record only if it belongs to `user_id`.

        Args:
            session: Async database session
            id: File UUID
            user_id: Requesting identity

        Returns:
            True if a row was deleted, False if absent or not owned
        """
        stmt = delete(FileModel).where(FileModel.id == id, FileModel.user_id == user_id)
        result = await session.execute(stmt)
        return result.rowcount > 0


file_crud = FileCRUD()
