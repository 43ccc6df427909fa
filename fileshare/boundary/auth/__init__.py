"""
Auth service boundary.

Exports: AuthClient, AuthSession
"""

from .auth_client import AuthClient, AuthSession

__all__ = ["AuthClient", "AuthSession"]
