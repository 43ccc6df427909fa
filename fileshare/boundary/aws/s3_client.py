"""
S3 client for the file blob bucket.

Keyed put/open/remove of file blobs on any S3-compatible object store
(the managed backend exposes one). Storage paths are used as object keys.

Dependencies: boto3
System role: Blob storage boundary for the file registry
"""

import logging
from typing import BinaryIO, Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from fileshare.core.exceptions import StorageError

logger = logging.getLogger(__name__)

_MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def _error_message(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Message") or str(error)
    return str(error)


class S3FileStore:
    """S3 client for file blobs keyed by storage path."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        cache_control: str | None = "max-age=3600",
        client=None,
    ) -> None:
        """
        Initialize S3 client for the file bucket.

        Args:
            bucket: Bucket holding file blobs
            region: Bucket region
            endpoint_url: S3-compatible endpoint (None for AWS)
            cache_control: Cache-Control header stored with uploads
            client: Pre-built boto3 S3 client (built from the arguments when None)
        """
        self._bucket = bucket
        self._region = region
        self._cache_control = cache_control
        self._s3_client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def put(
        self,
        path: str,
        fileobj: BinaryIO,
        content_type: str = "application/octet-stream",
        on_progress: Callable[[int], None] | None = None,
    ) -> None:
        """
        Write a blob.

        Args:
            path: Storage path (object key)
            fileobj: Readable binary file object
            content_type: MIME type stored with the object
            on_progress: Called with each number of bytes transferred

        Raises:
            StorageError: If the write fails
        """
        extra_args = {"ContentType": content_type}
        if self._cache_control:
            extra_args["CacheControl"] = self._cache_control

        try:
            self._s3_client.upload_fileobj(
                fileobj,
                self._bucket,
                path,
                ExtraArgs=extra_args,
                Callback=on_progress,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                _error_message(e),
                operation="upload",
                details={"path": path},
            ) from e

    def open(self, path: str):
        """
        Open a blob for streaming.

        Args:
            path: Storage path (object key)

        Returns:
            StreamingBody: Body supporting read() and iter_chunks()

        Raises:
            StorageError: If the object is missing or the read fails
        """
        try:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=path)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                _error_message(e),
                operation="download",
                details={"path": path},
            ) from e
        return response["Body"]

    def remove(self, path: str) -> None:
        """
        Delete a blob. A blob that is already gone counts as removed.

        Args:
            path: Storage path (object key)

        Raises:
            StorageError: If the delete fails for any other reason
        """
        try:
            self._s3_client.delete_object(Bucket=self._bucket, Key=path)
        except ClientError as e:
            if _error_code(e) in _MISSING_OBJECT_CODES:
                logger.info("Blob already absent", extra={"path": path})
                return
            raise StorageError(
                _error_message(e),
                operation="delete",
                details={"path": path},
            ) from e
        except BotoCoreError as e:
            raise StorageError(str(e), operation="delete", details={"path": path}) from e

