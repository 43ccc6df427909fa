"""
Dashboard API endpoints.

Routes:
- GET /dashboard - List the signed-in user's files, newest first
- DELETE /dashboard/files/{file_id} - Delete one of the user's files

Dependencies: fileshare.application.services, fileshare.models.file
System role: Owner file management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request

from fileshare.api.deps import get_current_identity, get_file_service, get_settings_dependency
from fileshare.application.services import FileService
from fileshare.configs import Settings
from fileshare.core.session_store import Identity
from fileshare.models.common import ErrorResponse, Notification
from fileshare.models.file import DeleteResponse, FileListResponse

from .router_utils import handle_file_errors, map_files_to_response, share_origin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=FileListResponse)
@handle_file_errors("Error", "Failed to fetch files")
async def list_files(
    request: Request,
    identity: Identity = Depends(get_current_identity),
    file_service: FileService = Depends(get_file_service),
    settings: Settings = Depends(get_settings_dependency),
) -> FileListResponse:
    """
    List the user's files with their share links.

    Args:
        request: Current request (share link origin)
        identity: Signed-in user
        file_service: Injected FileService
        settings: Application settings

    Returns:
        FileListResponse: All files of the user

    Raises:
        HTTPException(502): Metadata query failed
    """
    records = await file_service.list_files(identity.user_id)

    logger.info(
        "Listed files",
        extra={"user_id": identity.user_id, "file_count": len(records)},
    )

    return map_files_to_response(records, share_origin(request, settings))


@router.delete(
    "/files/{file_id}",
    response_model=DeleteResponse,
    responses={403: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
@handle_file_errors("Error", "Failed to delete file")
async def delete_file(
    file_id: UUID,
    identity: Identity = Depends(get_current_identity),
    file_service: FileService = Depends(get_file_service),
) -> DeleteResponse:
    """
    Delete a file's blob and record.

    Deleting a file that is already gone succeeds, so retries are safe.

    Args:
        file_id: File UUID
        identity: Signed-in user
        file_service: Injected FileService

    Returns:
        DeleteResponse: Deleted id and a notification

    Raises:
        HTTPException(403): Path outside the user's folder
        HTTPException(502): Storage or metadata call failed
    """
    record = await file_service.get_owned_file(file_id, identity.user_id)
    if record is None:
        logger.info(
            "Delete of absent file",
            extra={"file_id": str(file_id), "user_id": identity.user_id},
        )
    else:
        await file_service.delete_file(record.id, record.path, identity.user_id)

    return DeleteResponse(
        file_id=file_id,
        notification=Notification(
            title="File deleted",
            description="The file has been successfully deleted",
        ),
    )
