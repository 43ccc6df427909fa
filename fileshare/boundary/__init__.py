"""
Boundary layer for external system integrations.

Handles all interactions with the managed backend (auth, object storage,
relational store). Provides adapters and clients for these dependencies.
"""

from fileshare.boundary.backend import Backend, create_backend

__all__ = ["Backend", "create_backend"]
