"""API routers."""

from .auth import router as auth_router
from .dashboard import router as dashboard_router
from .download import router as download_router
from .health import connection_router
from .health import router as health_router
from .home import router as home_router
from .upload import router as upload_router

__all__ = [
    "auth_router",
    "connection_router",
    "dashboard_router",
    "download_router",
    "health_router",
    "home_router",
    "upload_router",
]
