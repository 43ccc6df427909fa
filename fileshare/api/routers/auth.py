"""
Auth API endpoints.

Routes:
- GET /login, GET /signup - Page stubs (signed-out only)
- POST /login - Sign in with email and password
- POST /signup - Create an account
- POST /logout - Sign out and clear session cookies
- GET /session - Current session
- POST /session/refresh - Trade the refresh cookie for new tokens

Dependencies: fileshare.boundary.auth, fileshare.models.auth
System role: Session lifecycle HTTP API
"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from fileshare.api.deps import get_auth_client, get_optional_identity, get_settings_dependency
from fileshare.boundary.auth import AuthClient, AuthSession
from fileshare.configs import Settings
from fileshare.core.exceptions import AuthenticationRequiredError, AuthServiceError
from fileshare.core.session_store import Identity
from fileshare.models.auth import (
    AuthPageResponse,
    AuthResponse,
    CredentialsRequest,
    SessionResponse,
)
from fileshare.models.common import Notification

from .router_utils import handle_file_errors

logger = logging.getLogger(__name__)

REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 30

router = APIRouter(tags=["auth"])


def _session_response(identity: Identity | None, expires_at: int | None = None) -> SessionResponse:
    if identity is None:
        return SessionResponse(authenticated=False)
    return SessionResponse(
        authenticated=True,
        user_id=identity.user_id,
        email=identity.email,
        expires_at=expires_at,
    )


def set_session_cookies(response: Response, session: AuthSession, settings: Settings) -> None:
    """
    Store the session tokens as HTTP-only cookies.

    Args:
        response: Outgoing response
        session: Active auth session
        settings: Cookie names and flags
    """
    max_age = None
    if session.expires_at is not None:
        max_age = max(int(session.expires_at - time.time()), 0)
    secure = settings.sharing.secure_cookies or settings.is_production

    response.set_cookie(
        settings.sharing.session_cookie_name,
        session.access_token,
        max_age=max_age,
        httponly=True,
        samesite="lax",
        secure=secure,
    )
    if session.refresh_token:
        response.set_cookie(
            settings.sharing.refresh_cookie_name,
            session.refresh_token,
            max_age=REFRESH_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
            secure=secure,
        )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.sharing.session_cookie_name)
    response.delete_cookie(settings.sharing.refresh_cookie_name)


@router.get("/login", response_model=AuthPageResponse)
async def login_page() -> AuthPageResponse:
    """Login page stub."""
    return AuthPageResponse(page="login", message="Sign in with your email and password")


@router.get("/signup", response_model=AuthPageResponse)
async def signup_page() -> AuthPageResponse:
    """Signup page stub."""
    return AuthPageResponse(page="signup", message="Create an account to start sharing files")


@router.post("/login", response_model=AuthResponse)
@handle_file_errors("Login failed", "Invalid email or password")
async def login(
    request: CredentialsRequest,
    response: Response,
    auth: AuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthResponse:
    """
    Sign in with email and password.

    Args:
        request: CredentialsRequest with email and password
        response: Response used to set session cookies
        auth: Injected AuthClient
        settings: Application settings

    Returns:
        AuthResponse: The new session

    Raises:
        HTTPException(400/401): Credentials rejected
        HTTPException(502): Auth service failed
    """
    session = await auth.sign_in_with_password(request.email, request.password)
    set_session_cookies(response, session, settings)

    logger.info("User signed in", extra={"user_id": session.identity.user_id})

    return AuthResponse(
        session=_session_response(session.identity, session.expires_at),
        notification=Notification(title="Signed in", description="Welcome back"),
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
@handle_file_errors("Signup failed", "Could not create account")
async def signup(
    request: CredentialsRequest,
    response: Response,
    auth: AuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthResponse:
    """
    Create an account.

    When the auth service requires email confirmation no session is
    returned and the user is asked to confirm first.

    Raises:
        HTTPException(400): Sign-up rejected
        HTTPException(502): Auth service failed
    """
    session = await auth.sign_up(request.email, request.password)

    logger.info(
        "User signed up",
        extra={"user_id": session.identity.user_id, "confirmed": session.is_active},
    )

    if not session.is_active:
        return AuthResponse(
            session=_session_response(None),
            notification=Notification(
                title="Check your email",
                description="Confirm your email address to finish signing up",
            ),
        )

    set_session_cookies(response, session, settings)
    return AuthResponse(
        session=_session_response(session.identity, session.expires_at),
        notification=Notification(title="Account created", description="You are now signed in"),
    )


@router.post("/logout", response_model=AuthResponse)
@handle_file_errors("Sign out failed", "Could not sign out")
async def logout(
    request: Request,
    response: Response,
    auth: AuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthResponse:
    """
    Sign out and clear session cookies.

    Signing out without a session is a no-op.
    """
    token = getattr(request.state, "access_token", None)
    if token:
        await auth.sign_out(token)
        logger.info("User signed out")

    clear_session_cookies(response, settings)
    return AuthResponse(
        session=_session_response(None),
        notification=Notification(title="Signed out", description="You have been signed out"),
    )


@router.get("/session", response_model=SessionResponse)
async def get_session(identity: Identity | None = Depends(get_optional_identity)) -> SessionResponse:
    """Current session as resolved by the access gate."""
    return _session_response(identity)


@router.post("/session/refresh", response_model=AuthResponse)
@handle_file_errors("Session expired", "Please sign in again")
async def refresh_session(
    request: Request,
    response: Response,
    auth: AuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings_dependency),
) -> AuthResponse:
    """
    Trade the refresh cookie for a new session.

    Raises:
        HTTPException(401): No refresh cookie or refresh rejected
        HTTPException(502): Auth service failed
    """
    refresh_token = request.cookies.get(settings.sharing.refresh_cookie_name)
    if not refresh_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=Notification.error("Session expired", "Please sign in again").model_dump(),
        )

    try:
        session = await auth.refresh_session(refresh_token)
    except AuthServiceError as e:
        # Expired or revoked refresh tokens come back as 4xx
        if e.status_code is None or e.status_code >= 500:
            raise
        raise AuthenticationRequiredError(e.message or "Please sign in again") from e
    set_session_cookies(response, session, settings)

    return AuthResponse(session=_session_response(session.identity, session.expires_at))
