"""
Auth domain models and schemas.

Request/response schemas for sign-in, sign-up and session views.

Dependencies: pydantic
System role: Auth API contracts
"""

from pydantic import BaseModel, Field

from fileshare.models.common import Notification


class CredentialsRequest(BaseModel):
    """Email/password pair for sign-in and sign-up."""

    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class SessionResponse(BaseModel):
    """Current session as seen by the client."""

    authenticated: bool
    user_id: str | None = None
    email: str | None = None
    expires_at: int | None = None


class AuthResponse(BaseModel):
    """Outcome of sign-in, sign-up, refresh or sign-out."""

    session: SessionResponse
    notification: Notification | None = None


class AuthPageResponse(BaseModel):
    """Login / signup page stubs."""

    page: str
    message: str
