"""
File registry service.

Coordinates the two-step writes and reads that make up a shared file:
a blob in object storage and a metadata row in the relational store,
correlated by the generated share key and the storage path.

Upload writes the blob first and the row second; delete removes the blob
first and the row second. Neither pair runs in a transaction, so a failure
between the steps leaves an orphaned blob (upload) or a dangling row
(delete). Both cases are logged with identifiers and left for manual
cleanup.

Dependencies: fileshare.boundary, fileshare.core, sqlalchemy, starlette
System role: File registry orchestration
"""

import logging
from typing import BinaryIO, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from fileshare.boundary.aws.s3_client import S3FileStore
from fileshare.boundary.db.CRUD.file_crud import FileCRUD, file_crud
from fileshare.boundary.db.models.file_model import FileModel
from fileshare.core.exceptions import (
    AccessDeniedError,
    FileRecordNotFoundError,
    MetadataError,
)
from fileshare.core.progress import ProgressCallback, ProgressTracker
from fileshare.core.share_keys import (
    MIN_SHARE_KEY_LENGTH,
    build_storage_path,
    generate_share_key,
    is_valid_share_key,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class FileService:
    """
    File registry orchestrator.

    Handles the file lifecycle: upload, listing, public resolution,
    counted download and owner deletion.
    """

    def __init__(
        self,
        db: AsyncSession,
        storage: S3FileStore,
        files: FileCRUD = file_crud,
        share_key_length: int = MIN_SHARE_KEY_LENGTH,
    ) -> None:
        """
        Initialize file service.

        Args:
            db: AsyncSession for file metadata
            storage: Blob store for file contents
            files: CRUD for file records
            share_key_length: Length of generated share keys
        """
        self.db = db
        self.storage = storage
        self.files = files
        self.share_key_length = share_key_length

    async def upload_file(
        self,
        user_id: str,
        filename: str,
        fileobj: BinaryIO,
        size: int,
        content_type: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> FileModel:
        """
        Store a file and register it under a new share key.

        Steps:
        1. Generate share key and storage path
        2. Write the blob (nothing is recorded if this fails)
        3. Insert the metadata row with downloads = 0 and commit

        Args:
            user_id: Owning identity
            filename: Original filename
            fileobj: Readable binary file object
            size: Size in bytes
            content_type: Declared MIME type
            on_progress: Receives upload percentages (best effort)

        Returns:
            FileModel: The committed record

        Raises:
            StorageError: Blob write failed
            MetadataError: Row insert failed after the blob was written
        """
        content_type = content_type or DEFAULT_CONTENT_TYPE
        unique_key = generate_share_key(self.share_key_length)
        path = build_storage_path(user_id, unique_key, filename)
        tracker = ProgressTracker(size, on_progress)

        logger.info(
            "Uploading file",
            extra={"user_id": user_id, "unique_key": unique_key, "file_size": size},
        )

        await run_in_threadpool(self.storage.put, path, fileobj, content_type, tracker)
        tracker.complete()

        try:
            record = await self.files.create(
                self.db,
                name=filename,
                size=size,
                content_type=content_type,
                path=path,
                unique_key=unique_key,
                user_id=user_id,
                downloads=0,
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Metadata insert failed after blob write, blob is orphaned",
                extra={"path": path, "unique_key": unique_key, "error": str(e)},
            )
            raise MetadataError(
                "Failed to save file details",
                operation="upload",
                details={"path": path},
            ) from e

        logger.info("File uploaded", extra={"file_id": str(record.id), "unique_key": unique_key})
        return record

    async def list_files(self, user_id: str) -> Sequence[FileModel]:
        """
        List a user's files, newest first.

        Args:
            user_id: Owning identity

        Returns:
            Sequence[FileModel]: All records of the user (no pagination)

        Raises:
            MetadataError: Query failed
        """
        try:
            return await self.files.get_by_user_id(self.db, user_id)
        except SQLAlchemyError as e:
            raise MetadataError("Failed to fetch files", operation="list") from e

    async def get_owned_file(self, file_id: UUID, user_id: str) -> FileModel | None:
        """
        Look up one of the user's own records.

        Raises:
            MetadataError: Query failed
        """
        try:
            return await self.files.get_owned(self.db, file_id, user_id)
        except SQLAlchemyError as e:
            raise MetadataError("Failed to fetch file", operation="delete") from e

    async def resolve(self, unique_key: str) -> FileModel:
        """
        Resolve a share key to its record. No identity is required.

        Args:
            unique_key: Share key from a download link

        Returns:
            FileModel: The matching record

        Raises:
            FileRecordNotFoundError: Key was never issued or the file was deleted
            MetadataError: Query failed
        """
        if not is_valid_share_key(unique_key):
            raise FileRecordNotFoundError(unique_key=unique_key)

        try:
            record = await self.files.get_by_unique_key(self.db, unique_key)
        except SQLAlchemyError as e:
            raise MetadataError("Failed to fetch file details", operation="resolve") from e

        if record is None:
            raise FileRecordNotFoundError(unique_key=unique_key)
        return record

    async def download(self, unique_key: str):
        """
        Count a download and open the blob.

        The counter is incremented by the database before the blob is
        fetched. The two steps are independent: a failed increment is logged
        and the fetch still happens; a failed fetch keeps the increment.

        Args:
            unique_key: Share key from a download link

        Returns:
            tuple[FileModel, StreamingBody]: Record and readable blob body

        Raises:
            FileRecordNotFoundError: Unknown key
            StorageError: Blob could not be opened
        """
        record = await self.resolve(unique_key)

        try:
            await self.files.increment_downloads(self.db, record.id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning(
                "Download counter increment failed",
                extra={"file_id": str(record.id), "error": str(e)},
            )

        body = await run_in_threadpool(self.storage.open, record.path)
        logger.info("Download started", extra={"file_id": str(record.id), "unique_key": unique_key})
        return record, body

    async def delete_file(self, file_id: UUID, path: str, user_id: str) -> None:
        """
        Remove a file's blob, then its record.

        Idempotent: an already-absent blob counts as removed and an
        already-absent record is not an error.

        Args:
            file_id: File UUID
            path: Storage path of the blob
            user_id: Owning identity

        Raises:
            AccessDeniedError: Path is outside the user's storage folder
            StorageError: Blob removal failed
            MetadataError: Row removal failed after the blob was removed
        """
        if not path.startswith(f"{user_id}/"):
            raise AccessDeniedError(
                "You can only delete your own files",
                user_id=user_id,
                details={"path": path},
            )

        await run_in_threadpool(self.storage.remove, path)

        try:
            deleted = await self.files.delete_owned(self.db, file_id, user_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Metadata removal failed after blob removal, record is dangling",
                extra={"file_id": str(file_id), "path": path, "error": str(e)},
            )
            raise MetadataError(
                "Failed to delete file",
                operation="delete",
                details={"file_id": str(file_id)},
            ) from e

        if not deleted:
            logger.info("File record already absent", extra={"file_id": str(file_id)})
