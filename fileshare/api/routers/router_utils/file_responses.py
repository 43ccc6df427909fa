"""
File response mapping utilities.

Transforms ORM records into Pydantic response models and attaches share
links. Centralizes response construction logic.

Dependencies: fileshare.models.file, fileshare.core.share_keys
System role: File response transformation
"""

from typing import Sequence

from fastapi import Request

from fileshare.boundary.db.models.file_model import FileModel
from fileshare.configs import Settings
from fileshare.core.share_keys import build_share_link
from fileshare.models.file import (
    FileListResponse,
    FileResponse,
    SharedFileResponse,
    format_file_size,
)


def share_origin(request: Request, settings: Settings) -> str:
    """
    Origin used in share links.

    Args:
        request: Current request (fallback origin)
        settings: Application settings (configured origin)

    Returns:
        str: Configured public origin, else the request base URL
    """
    return settings.sharing.public_origin or str(request.base_url)


def map_file_to_response(record: FileModel, origin: str) -> FileResponse:
    """
    Transform a file record into FileResponse.

    Args:
        record: FileModel row
        origin: Share link origin

    Returns:
        FileResponse: Pydantic model for API response
    """
    return FileResponse(
        id=record.id,
        name=record.name,
        size=record.size,
        type=record.content_type,
        created_at=record.created_at,
        unique_key=record.unique_key,
        downloads=record.downloads,
        path=record.path,
        share_url=build_share_link(origin, record.unique_key),
        size_display=format_file_size(record.size),
    )


def map_files_to_response(records: Sequence[FileModel], origin: str) -> FileListResponse:
    """Transform an owner's records into the dashboard listing."""
    files = [map_file_to_response(record, origin) for record in records]
    return FileListResponse(files=files, total=len(files))


def map_shared_file_to_response(record: FileModel, origin: str) -> SharedFileResponse:
    """
    Transform a record into its public view.

    Owner and storage path are not exposed.
    """
    return SharedFileResponse(
        id=record.id,
        name=record.name,
        size=record.size,
        type=record.content_type,
        size_display=format_file_size(record.size),
        unique_key=record.unique_key,
        download_url=f"{origin.rstrip('/')}/download/{record.unique_key}/content",
    )
