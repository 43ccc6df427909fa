"""
Home API endpoint.

Routes: GET /

Dependencies: fileshare.api.deps
System role: Landing view with session-aware navigation
"""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fileshare.api.deps import get_optional_identity
from fileshare.core.session_store import Identity


class NavLink(BaseModel):
    """Navigation entry; `method` is the HTTP method the target expects."""

    label: str
    href: str
    method: Literal["GET", "POST"] = "GET"


class HomeResponse(BaseModel):
    """Landing view."""

    title: str
    description: str
    authenticated: bool
    navigation: list[NavLink]


router = APIRouter(tags=["home"])


def build_navigation(identity: Identity | None) -> list[NavLink]:
    """Navigation entries for the current session state."""
    if identity is not None:
        links = [
            NavLink(label="Dashboard", href="/dashboard"),
            NavLink(label="Upload", href="/upload", method="POST"),
            NavLink(label="Sign Out", href="/logout", method="POST"),
        ]
    else:
        links = [
            NavLink(label="Login", href="/login"),
            NavLink(label="Sign Up", href="/signup"),
        ]
    links.append(NavLink(label="Test Connection", href="/test-connection"))
    return links


@router.get("/", response_model=HomeResponse)
async def home(identity: Identity | None = Depends(get_optional_identity)) -> HomeResponse:
    """Landing page."""
    return HomeResponse(
        title="Share Files Securely with Unique Links",
        description=(
            "Upload your files and share them with anyone using unique, secure links. "
            "No signup required for downloading."
        ),
        authenticated=identity is not None,
        navigation=build_navigation(identity),
    )
