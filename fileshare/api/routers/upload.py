"""
Upload API endpoint.

Routes: POST /upload - Multipart upload of a single file

Dependencies: fileshare.application.services, fileshare.models.file
System role: File upload HTTP API
"""

import logging
import os

from fastapi import APIRouter, Depends, File, Request, UploadFile

from fileshare.api.deps import get_current_identity, get_file_service, get_settings_dependency
from fileshare.application.services import FileService
from fileshare.configs import Settings
from fileshare.core.session_store import Identity
from fileshare.models.common import ErrorResponse, Notification
from fileshare.models.file import UploadResponse

from .router_utils import handle_file_errors, map_file_to_response, share_origin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


def _upload_size(file: UploadFile) -> int:
    """Size of an upload, measured from the spooled file when not declared."""
    if file.size is not None:
        return file.size
    current = file.file.tell()
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(current)
    return size


@router.post(
    "",
    response_model=UploadResponse,
    status_code=201,
    responses={502: {"model": ErrorResponse}},
)
@handle_file_errors("Upload failed", "There was an error uploading your file")
async def upload_file(
    request: Request,
    file: UploadFile = File(...),
    identity: Identity = Depends(get_current_identity),
    file_service: FileService = Depends(get_file_service),
    settings: Settings = Depends(get_settings_dependency),
) -> UploadResponse:
    """
    Upload a file and issue its share link.

    Args:
        request: Current request (share link origin)
        file: Uploaded file
        identity: Signed-in user
        file_service: Injected FileService
        settings: Application settings

    Returns:
        UploadResponse: Stored file and its share link

    Raises:
        HTTPException(502): Storage write or metadata insert failed
    """
    size = _upload_size(file)
    filename = file.filename or "file"

    def log_progress(percent: int) -> None:
        logger.debug("Upload progress", extra={"upload_filename": filename, "percent": percent})

    try:
        record = await file_service.upload_file(
            user_id=identity.user_id,
            filename=filename,
            fileobj=file.file,
            size=size,
            content_type=file.content_type,
            on_progress=log_progress,
        )
    finally:
        await file.close()

    response = map_file_to_response(record, share_origin(request, settings))
    return UploadResponse(
        file=response,
        share_url=response.share_url,
        notification=Notification(
            title="File uploaded successfully",
            description="Your file has been uploaded and is ready to share",
        ),
    )
