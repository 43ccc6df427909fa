"""
File domain models and schemas.

Request/response schemas for upload, dashboard and download views.

Dependencies: pydantic
System role: File API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from fileshare.models.common import Notification

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_file_size(size: int) -> str:
    """
    Render a byte count for humans.

    Args:
        size: Size in bytes

    Returns:
        str: e.g. "0 Bytes", "1.95 MB"
    """
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


class FileResponse(BaseModel):
    """A file as its owner sees it on the dashboard."""

    id: uuid.UUID
    name: str
    size: int = Field(ge=0)
    type: str
    created_at: datetime
    unique_key: str
    downloads: int = Field(ge=0)
    path: str
    share_url: str
    size_display: str


class FileListResponse(BaseModel):
    """Dashboard listing, newest first."""

    files: list[FileResponse]
    total: int


class UploadResponse(BaseModel):
    """Result of a successful upload."""

    file: FileResponse
    share_url: str
    notification: Notification


class DeleteResponse(BaseModel):
    """Result of a delete request."""

    file_id: uuid.UUID
    notification: Notification


class SharedFileResponse(BaseModel):
    """Public view of a shared file, resolved from its share key."""

    id: uuid.UUID
    name: str
    size: int = Field(ge=0)
    type: str
    size_display: str
    unique_key: str
    download_url: str
