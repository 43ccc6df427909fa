"""
Access gate middleware.

Resolves the session of every request and applies the route access gate
before any view runs: anonymous requests to protected views are sent to the
login page, signed-in requests to the login/signup pages are sent to the
dashboard.

Dependencies: fastapi, starlette, fileshare.core, fileshare.boundary
System role: Session-gated routing at the HTTP edge
"""

import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from fileshare.configs import get_settings
from fileshare.core.access_gate import AccessGate
from fileshare.core.exceptions import FileShareException
from fileshare.core.session_store import Identity
from fileshare.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


def extract_access_token(request: Request, cookie_name: str) -> str | None:
    """
    Read the access token from the session cookie or a Bearer header.

    Args:
        request: Incoming request
        cookie_name: Name of the session cookie

    Returns:
        str | None: Token, cookie first
    """
    token = request.cookies.get(cookie_name)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


class AccessGateMiddleware(BaseHTTPMiddleware):
    """
    Middleware evaluating the access gate on every request.

    Sets `request.state.session` (Identity or None) and
    `request.state.access_token` for downstream views.
    """

    def __init__(self, app, gate: AccessGate | None = None) -> None:
        super().__init__(app)
        self.gate = gate or AccessGate()

    async def dispatch(self, request: Request, call_next):
        """
        Resolve the session, then allow or redirect.

        Args:
            request: FastAPI request
            call_next: Next middleware in chain

        Returns:
            Response: View response or a 307 redirect
        """
        settings = getattr(request.app.state, "settings", None) or get_settings()
        token = extract_access_token(request, settings.sharing.session_cookie_name)
        identity = await self._resolve_identity(request, token)

        request.state.session = identity
        request.state.access_token = token if identity is not None else None

        path = request.url.path
        decision = self.gate.decide(path, has_session=identity is not None)
        if not decision.allowed:
            logger.info(
                "Access gate redirect",
                extra={"path": path, "outcome": decision.outcome.value, "location": decision.location},
            )
            return RedirectResponse(decision.location, status_code=307)

        return await call_next(request)

    async def _resolve_identity(self, request: Request, token: str | None) -> Identity | None:
        if not token:
            return None

        backend = getattr(request.app.state, "backend", None)
        if backend is None:
            logger.warning("No backend configured, treating request as anonymous")
            return None

        try:
            return await backend.auth.get_user(token)
        except FileShareException as e:
            log_with_context(
                logger,
                logging.WARNING,
                "Session lookup failed, treating request as anonymous",
                path=request.url.path,
                token=token,
                error=e.message,
            )
            return None
