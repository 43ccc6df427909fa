"""
Core business logic module.

Contains the access gate, session store, share key rules and the
exception hierarchy. Nothing here talks to the network.
"""

from fileshare.core.access_gate import AccessGate, GateDecision, GateOutcome
from fileshare.core.exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    AuthServiceError,
    BackendError,
    ConfigurationError,
    FileRecordNotFoundError,
    FileShareException,
    MetadataError,
    StorageError,
)
from fileshare.core.progress import ProgressTracker
from fileshare.core.session_store import (
    Identity,
    SessionChangeEvent,
    SessionEventHub,
    SessionEventType,
    SessionState,
    SessionStatus,
    SessionStore,
    reduce_session,
)

__all__ = [
    # Exceptions
    "FileShareException",
    "AccessDeniedError",
    "ConfigurationError",
    "BackendError",
    "StorageError",
    "MetadataError",
    "AuthServiceError",
    "AuthenticationRequiredError",
    "FileRecordNotFoundError",
    # Access control
    "AccessGate",
    "GateDecision",
    "GateOutcome",
    # Session state
    "Identity",
    "SessionChangeEvent",
    "SessionEventHub",
    "SessionEventType",
    "SessionState",
    "SessionStatus",
    "SessionStore",
    "reduce_session",
    # Uploads
    "ProgressTracker",
]
