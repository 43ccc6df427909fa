"""
Async HTTP client for the file sharing service.

The UI runtime's view of the service: session operations that publish
session-change events, owner file management with upload progress, and
public share-key resolution and download. It is also the session source
of a SessionStore.

Dependencies: httpx, fileshare.core, fileshare.models
System role: Client runtime over the HTTP API
"""

import logging
import os
from typing import Any, BinaryIO
from uuid import UUID

import httpx

from fileshare.core.exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    BackendError,
    FileRecordNotFoundError,
)
from fileshare.core.progress import ProgressCallback, ProgressTracker
from fileshare.core.session_store import (
    Identity,
    SessionChangeEvent,
    SessionEventHub,
    SessionEventType,
    SessionStore,
    SessionSubscription,
)
from fileshare.core.share_keys import build_share_link
from fileshare.models.auth import AuthResponse, SessionResponse
from fileshare.models.file import (
    DeleteResponse,
    FileListResponse,
    SharedFileResponse,
    UploadResponse,
)

logger = logging.getLogger(__name__)

_REDIRECT_CODES = (301, 302, 303, 307, 308)


class ProgressReader:
    """
    Read-through wrapper reporting bytes read to a ProgressTracker.

    Exposes tell/seek so httpx can size the multipart body up front.
    """

    def __init__(self, fileobj: BinaryIO, tracker: ProgressTracker) -> None:
        self._fileobj = fileobj
        self._tracker = tracker

    def read(self, size: int = -1) -> bytes:
        chunk = self._fileobj.read(size)
        if chunk:
            self._tracker.advance(len(chunk))
        return chunk

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._fileobj.seek(offset, whence)

    def tell(self) -> int:
        return self._fileobj.tell()


def _identity(session: SessionResponse) -> Identity | None:
    if not session.authenticated or session.user_id is None:
        return None
    return Identity(user_id=session.user_id, email=session.email)


def _file_size(fileobj: BinaryIO) -> int:
    current = fileobj.tell()
    size = fileobj.seek(0, os.SEEK_END)
    fileobj.seek(current)
    return size - current


def _error_description(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Request failed with status {response.status_code}"
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict):
        return detail.get("description") or detail.get("title") or str(detail)
    return str(detail or body)


class ShareClient:
    """
    Client for the file sharing HTTP API.

    Keeps session cookies between calls. Redirects are not followed: a
    redirect to the login page means the session is missing.
    """

    def __init__(
        self,
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize client.

        Args:
            base_url: Service origin, also the share link origin
            transport: Optional httpx transport (tests inject a MockTransport)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=httpx.Timeout(timeout),
            follow_redirects=False,
        )
        self._events = SessionEventHub()

    async def close(self) -> None:
        """Close the underlying HTTP client and end event subscriptions."""
        self._events.close_all()
        await self._client.aclose()

    async def __aenter__(self) -> "ShareClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # Session source

    async def get_session(self) -> Identity | None:
        """
        Look up the current session.

        Returns:
            Identity | None: Signed-in identity, None when signed out
        """
        response = await self._request("GET", "/session", operation="get_session")
        return _identity(SessionResponse.model_validate(response.json()))

    def session_events(self) -> SessionSubscription:
        """Subscribe to session changes made through this client."""
        return self._events.subscribe()

    def session_store(self) -> SessionStore:
        """Create a SessionStore fed by this client."""
        return SessionStore(self)

    # Session operations

    async def sign_in(self, email: str, password: str) -> Identity:
        """
        Sign in with email and password.

        Raises:
            BackendError: Credentials rejected or service failure
        """
        response = await self._request(
            "POST",
            "/login",
            operation="sign_in",
            json={"email": email, "password": password},
        )
        identity = _identity(AuthResponse.model_validate(response.json()).session)
        self._publish(SessionEventType.SIGNED_IN, identity)
        return identity

    async def sign_up(self, email: str, password: str) -> Identity | None:
        """
        Create an account.

        Returns:
            Identity | None: Signed-in identity, None while email
            confirmation is pending
        """
        response = await self._request(
            "POST",
            "/signup",
            operation="sign_up",
            json={"email": email, "password": password},
        )
        identity = _identity(AuthResponse.model_validate(response.json()).session)
        if identity is not None:
            self._publish(SessionEventType.SIGNED_IN, identity)
        return identity

    async def sign_out(self) -> None:
        """Sign out and forget the session cookies."""
        await self._request("POST", "/logout", operation="sign_out")
        self._client.cookies.clear()
        self._publish(SessionEventType.SIGNED_OUT, None)

    async def refresh_session(self) -> Identity | None:
        """Refresh the session tokens using the refresh cookie."""
        response = await self._request("POST", "/session/refresh", operation="refresh")
        identity = _identity(AuthResponse.model_validate(response.json()).session)
        self._publish(SessionEventType.TOKEN_REFRESHED, identity)
        return identity

    # Owner file management

    async def upload(
        self,
        fileobj: BinaryIO,
        filename: str,
        content_type: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResponse:
        """
        Upload a file.

        Args:
            fileobj: Readable binary file object, positioned at the start
            filename: Name stored with the file
            content_type: MIME type (the service defaults it when None)
            on_progress: Receives percentages while the body is sent

        Returns:
            UploadResponse: Stored file and its share link

        Raises:
            AuthenticationRequiredError: Not signed in
            BackendError: Upload failed
        """
        tracker = ProgressTracker(_file_size(fileobj), on_progress)
        reader = ProgressReader(fileobj, tracker)
        file_field: tuple[Any, ...] = (filename, reader)
        if content_type:
            file_field = (filename, reader, content_type)

        response = await self._request(
            "POST",
            "/upload",
            operation="upload",
            files={"file": file_field},
        )
        tracker.complete()
        return UploadResponse.model_validate(response.json())

    async def list_files(self) -> FileListResponse:
        """List the signed-in user's files, newest first."""
        response = await self._request("GET", "/dashboard", operation="list")
        return FileListResponse.model_validate(response.json())

    async def delete_file(self, file_id: UUID | str) -> DeleteResponse:
        """Delete one of the signed-in user's files."""
        response = await self._request("DELETE", f"/dashboard/files/{file_id}", operation="delete")
        return DeleteResponse.model_validate(response.json())

    # Public access

    async def resolve(self, unique_key: str) -> SharedFileResponse:
        """
        Fetch the public details of a shared file.

        Raises:
            FileRecordNotFoundError: Unknown or deleted share key
        """
        response = await self._request(
            "GET", f"/download/{unique_key}", operation="resolve", unique_key=unique_key
        )
        return SharedFileResponse.model_validate(response.json())

    async def download(self, unique_key: str, destination: BinaryIO) -> int:
        """
        Stream a shared file into `destination`.

        Args:
            unique_key: Share key
            destination: Writable binary file object

        Returns:
            int: Number of bytes written

        Raises:
            FileRecordNotFoundError: Unknown or deleted share key
            BackendError: Blob could not be fetched
        """
        written = 0
        async with self._client.stream("GET", f"/download/{unique_key}/content") as response:
            if not response.is_success:
                await response.aread()
                self._raise_for_response(response, "download", unique_key)
            async for chunk in response.aiter_bytes():
                destination.write(chunk)
                written += len(chunk)

        logger.info("Downloaded file", extra={"unique_key": unique_key, "bytes": written})
        return written

    def share_link(self, unique_key: str) -> str:
        """Public link for a share key."""
        return build_share_link(self.base_url, unique_key)

    # Internals

    def _publish(self, event_type: SessionEventType, identity: Identity | None) -> None:
        self._events.publish(SessionChangeEvent(type=event_type, identity=identity))

    async def _request(
        self,
        method: str,
        url: str,
        operation: str,
        unique_key: str | None = None,
        **kwargs,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "File sharing service unreachable",
                extra={"operation": operation, "error_type": type(e).__name__, "error_msg": str(e)},
            )
            raise BackendError(f"Service unreachable: {e}", operation=operation) from e

        if not response.is_success:
            self._raise_for_response(response, operation, unique_key)
        return response

    @staticmethod
    def _raise_for_response(
        response: httpx.Response,
        operation: str,
        unique_key: str | None = None,
    ) -> None:
        if response.status_code in _REDIRECT_CODES:
            location = response.headers.get("location", "")
            if location.endswith("/login"):
                raise AuthenticationRequiredError("You must be logged in", {"operation": operation})
            raise BackendError(
                f"Unexpected redirect to {location}",
                operation=operation,
                details={"status_code": response.status_code},
            )

        description = _error_description(response)
        if response.status_code == 404:
            raise FileRecordNotFoundError(unique_key=unique_key)
        if response.status_code == 401:
            raise AuthenticationRequiredError(description, {"operation": operation})
        if response.status_code == 403:
            raise AccessDeniedError(description)
        raise BackendError(
            description,
            operation=operation,
            details={"status_code": response.status_code},
        )
