"""
Auth service client.

Talks to the managed backend's auth REST API: password sign-in, sign-up,
token refresh, sign-out and user lookup. Access tokens can also be verified
locally when the backend's JWT secret is configured.

Dependencies: httpx, pyjwt
System role: Session retrieval boundary for the access gate and auth views
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

import httpx
import jwt

from fileshare.configs.backend import BackendSettings
from fileshare.core.exceptions import AuthServiceError
from fileshare.core.session_store import Identity

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AuthSession:
    """
    Tokens and identity returned by the auth service.

    access_token is None after a sign-up that still awaits confirmation.
    """

    identity: Identity
    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = None

    @property
    def is_active(self) -> bool:
        return self.access_token is not None


def _identity_from_user(user: dict[str, Any]) -> Identity:
    return Identity(user_id=str(user["id"]), email=user.get("email"))


def _session_from_payload(payload: dict[str, Any]) -> AuthSession:
    """Build an AuthSession from a token response or a bare user object."""
    user = payload.get("user") or payload
    return AuthSession(
        identity=_identity_from_user(user),
        access_token=payload.get("access_token"),
        refresh_token=payload.get("refresh_token"),
        expires_at=payload.get("expires_at"),
    )


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if not isinstance(body, dict):
        return default
    return (
        body.get("error_description")
        or body.get("msg")
        or body.get("message")
        or body.get("error")
        or default
    )


class AuthClient:
    """Client for the managed auth REST API."""

    def __init__(
        self,
        settings: BackendSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize auth client.

        Args:
            settings: Backend endpoint, public key and token settings
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.auth_url,
            headers={"apikey": settings.anon_key},
            timeout=httpx.Timeout(settings.request_timeout),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """
        Exchange credentials for a session.

        Args:
            email: Account email
            password: Account password

        Returns:
            AuthSession: Active session

        Raises:
            AuthServiceError: Invalid credentials or service failure
        """
        return await self._post_for_session(
            "/token",
            operation="sign_in",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def sign_up(self, email: str, password: str) -> AuthSession:
        """
        Register an account.

        Args:
            email: Account email
            password: Account password

        Returns:
            AuthSession: Active session, or an inactive one when the service
            requires email confirmation first

        Raises:
            AuthServiceError: Rejected sign-up or service failure
        """
        return await self._post_for_session(
            "/signup",
            operation="sign_up",
            json={"email": email, "password": password},
        )

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        """
        Trade a refresh token for a new session.

        Raises:
            AuthServiceError: Expired/invalid refresh token or service failure
        """
        return await self._post_for_session(
            "/token",
            operation="refresh",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )

    async def sign_out(self, access_token: str) -> None:
        """
        Revoke the session behind an access token.

        An already-invalid token is treated as signed out.

        Raises:
            AuthServiceError: Service failure
        """
        response = await self._request(
            "POST",
            "/logout",
            operation="sign_out",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if response.status_code in (401, 403, 404):
            return
        self._raise_for_status(response, "sign_out")

    async def get_user(self, access_token: str | None) -> Identity | None:
        """
        Resolve the identity behind an access token.

        Uses local JWT verification when a secret is configured, the auth
        service's user endpoint otherwise.

        Args:
            access_token: Bearer token from the request (may be None)

        Returns:
            Identity | None: The user, or None when the token is missing,
            expired or rejected

        Raises:
            AuthServiceError: The auth service could not be reached or sent
                an unreadable user payload
        """
        if not access_token:
            return None

        if self._settings.jwt_secret:
            return self._verify_locally(access_token)

        response = await self._request(
            "GET",
            "/user",
            operation="get_user",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if response.status_code in (401, 403):
            return None
        self._raise_for_status(response, "get_user")
        return self._parse(response, "get_user", _identity_from_user)

    async def check_health(self) -> None:
        """
        Ping the auth service.

        Raises:
            AuthServiceError: If the service is unreachable or unhealthy
        """
        response = await self._request("GET", "/health", operation="health")
        self._raise_for_status(response, "health")

    def _verify_locally(self, access_token: str) -> Identity | None:
        try:
            payload = jwt.decode(
                access_token,
                self._settings.jwt_secret,
                algorithms=["HS256"],
                audience=self._settings.jwt_audience,
            )
        except jwt.ExpiredSignatureError:
            logger.info("Access token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid access token", extra={"error": str(e)})
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None
        return Identity(user_id=str(user_id), email=payload.get("email"))

    async def _post_for_session(self, url: str, operation: str, **kwargs) -> AuthSession:
        response = await self._request("POST", url, operation=operation, **kwargs)
        self._raise_for_status(response, operation)
        return self._parse(response, operation, _session_from_payload)

    @staticmethod
    def _parse(response: httpx.Response, operation: str, build: Callable[[dict[str, Any]], T]) -> T:
        """
        Decode a successful response body into a domain object.

        Raises:
            AuthServiceError: Body is not JSON or lacks the expected fields
        """
        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise TypeError(f"expected an object, got {type(payload).__name__}")
            return build(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(
                "Unexpected auth service response",
                extra={
                    "operation": operation,
                    "status_code": response.status_code,
                    "content_type": response.headers.get("content-type"),
                    "error_type": type(e).__name__,
                },
            )
            raise AuthServiceError(
                "Auth service returned an unexpected response",
                operation=operation,
            ) from e

    async def _request(self, method: str, url: str, operation: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(
                "Auth service request failed",
                extra={"operation": operation, "error_type": type(e).__name__, "error_msg": str(e)},
            )
            raise AuthServiceError(
                f"Auth service unreachable: {e}",
                operation=operation,
            ) from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, operation: str) -> None:
        if response.is_success:
            return
        raise AuthServiceError(
            _error_message(response, f"Auth service returned {response.status_code}"),
            status_code=response.status_code,
            operation=operation,
        )
