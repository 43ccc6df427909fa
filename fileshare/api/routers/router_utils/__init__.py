"""
Router utility functions.

Contains helper functions extracted from router endpoints to keep them clean.
"""

from fileshare.api.routers.router_utils.error_handling import handle_file_errors
from fileshare.api.routers.router_utils.file_responses import (
    map_file_to_response,
    map_files_to_response,
    map_shared_file_to_response,
    share_origin,
)

__all__ = [
    "handle_file_errors",
    "map_file_to_response",
    "map_files_to_response",
    "map_shared_file_to_response",
    "share_origin",
]
