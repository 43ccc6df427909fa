"""
Route access gate.

Decides, per request, whether a path may be served for the current session
state or must be redirected. Protected routes need a present session,
auth-only routes need an absent one, everything else is public.

Dependencies: None (pure domain layer)
System role: Session-gated routing rules
"""

import enum
from dataclasses import dataclass
from typing import Iterable

PROTECTED_ROUTE_PREFIXES: tuple[str, ...] = ("/dashboard", "/upload")
AUTH_ONLY_ROUTES: frozenset[str] = frozenset({"/login", "/signup"})

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"


class GateOutcome(str, enum.Enum):
    """Possible outcomes of a gate decision."""

    ALLOW = "allow"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    REDIRECT_TO_DASHBOARD = "redirect_to_dashboard"


@dataclass(frozen=True)
class GateDecision:
    """
    Result of evaluating one request against the gate.

    Attributes:
        outcome: Allow or one of the redirects
        location: Redirect target path, None when allowed
    """

    outcome: GateOutcome
    location: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is GateOutcome.ALLOW


class AccessGate:
    """
    Pure decision function over (path, session presence).

    The protected-route check is evaluated before the auth-route check.
    Decisions are never cached; callers evaluate every request.
    """

    def __init__(
        self,
        protected_prefixes: Iterable[str] = PROTECTED_ROUTE_PREFIXES,
        auth_only_paths: Iterable[str] = AUTH_ONLY_ROUTES,
        login_path: str = LOGIN_PATH,
        dashboard_path: str = DASHBOARD_PATH,
    ) -> None:
        """
        Initialize gate with its static route sets.

        Args:
            protected_prefixes: Path prefixes that require a present session
            auth_only_paths: Exact paths that require an absent session
            login_path: Redirect target for unauthenticated requests
            dashboard_path: Redirect target for authenticated requests
        """
        self.protected_prefixes = tuple(protected_prefixes)
        self.auth_only_paths = frozenset(auth_only_paths)
        self.login_path = login_path
        self.dashboard_path = dashboard_path

    def is_protected(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_prefixes)

    def is_auth_only(self, path: str) -> bool:
        return path in self.auth_only_paths

    def decide(self, path: str, has_session: bool) -> GateDecision:
        """
        Decide what to do with a request.

        Args:
            path: Request path (no query string)
            has_session: Whether the request carries a present session

        Returns:
            GateDecision: Allow, redirect to login, or redirect to dashboard
        """
        if self.is_protected(path) and not has_session:
            return GateDecision(GateOutcome.REDIRECT_TO_LOGIN, self.login_path)

        if self.is_auth_only(path) and has_session:
            return GateDecision(GateOutcome.REDIRECT_TO_DASHBOARD, self.dashboard_path)

        return GateDecision(GateOutcome.ALLOW)
