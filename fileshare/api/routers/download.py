"""
Download API endpoints.

Routes:
- GET /download/{key} - Public details of a shared file
- GET /download/{key}/content - Stream the file (counts a download)

Neither route needs a session: the share key is the capability.

Dependencies: fileshare.application.services, fileshare.models.file
System role: Public file retrieval HTTP API
"""

import logging
from typing import Iterator
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from fileshare.api.deps import get_file_service, get_settings_dependency
from fileshare.application.services import FileService
from fileshare.configs import Settings
from fileshare.models.common import ErrorResponse
from fileshare.models.file import SharedFileResponse

from .router_utils import handle_file_errors, map_shared_file_to_response, share_origin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/download", tags=["download"])


def content_disposition(filename: str) -> str:
    """Attachment header carrying the original filename (RFC 6266)."""
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


def iter_blob(body, chunk_size: int) -> Iterator[bytes]:
    """Yield a blob body in chunks and close it afterwards."""
    try:
        yield from body.iter_chunks(chunk_size)
    finally:
        body.close()


@router.get(
    "/{unique_key}",
    response_model=SharedFileResponse,
    responses={404: {"model": ErrorResponse}},
)
@handle_file_errors("Error", "Failed to load file details")
async def get_shared_file(
    unique_key: str,
    request: Request,
    file_service: FileService = Depends(get_file_service),
    settings: Settings = Depends(get_settings_dependency),
) -> SharedFileResponse:
    """
    Resolve a share key to the file's public details.

    Args:
        unique_key: Share key from the link
        request: Current request (download URL origin)
        file_service: Injected FileService
        settings: Application settings

    Returns:
        SharedFileResponse: Name, size and type of the file

    Raises:
        HTTPException(404): File not found or has been removed
    """
    record = await file_service.resolve(unique_key)
    return map_shared_file_to_response(record, share_origin(request, settings))


@router.get(
    "/{unique_key}/content",
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
@handle_file_errors("Error", "Failed to download file")
async def download_file(
    unique_key: str,
    file_service: FileService = Depends(get_file_service),
    settings: Settings = Depends(get_settings_dependency),
) -> StreamingResponse:
    """
    Count a download and stream the file.

    Raises:
        HTTPException(404): File not found or has been removed
        HTTPException(502): Blob could not be fetched
    """
    record, body = await file_service.download(unique_key)

    logger.info("Streaming file", extra={"file_id": str(record.id), "unique_key": unique_key})

    return StreamingResponse(
        iter_blob(body, settings.sharing.download_chunk_size),
        media_type=record.content_type,
        headers={
            "Content-Disposition": content_disposition(record.name),
        },
    )
