"""
Client runtime.

Exports: ShareClient
"""

from .share_client import ProgressReader, ShareClient

__all__ = ["ProgressReader", "ShareClient"]
