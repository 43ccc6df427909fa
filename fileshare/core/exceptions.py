"""
Exception hierarchy for the file sharing application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class FileShareException(Exception):
    """Base exception for all file sharing application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(FileShareException):
    """Raised when required configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            missing: Names of the missing configuration values
            details: Additional context
        """
        details = details or {}
        if missing:
            details["missing"] = missing
        super().__init__(message, details)


class BackendError(FileShareException):
    """Raised when a call to the managed backend fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize backend error.

        Args:
            message: Error message (the backend's own message when available)
            operation: Operation that failed (upload, list, delete, download)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        self.operation = operation
        super().__init__(message, details)


class StorageError(BackendError):
    """Raised when an object storage call fails."""

    pass


class MetadataError(BackendError):
    """Raised when a relational metadata call fails."""

    pass


class AuthServiceError(BackendError):
    """Raised when the auth service rejects or fails a request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize auth service error.

        Args:
            message: Error message returned by the auth service
            status_code: HTTP status returned by the auth service
            operation: Auth operation that failed (sign_in, refresh, ...)
            details: Additional context
        """
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, operation, details)


class AuthenticationRequiredError(FileShareException):
    """Raised when an operation needs a present session and none exists."""

    pass


class FileRecordNotFoundError(FileShareException):
    """Raised when no file record matches a share key or id."""

    def __init__(
        self,
        unique_key: str | None = None,
        file_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize file not found error.

        Args:
            unique_key: Share key that did not resolve
            file_id: Record id that did not resolve
            details: Additional context
        """
        details = details or {}
        if unique_key:
            details["unique_key"] = unique_key
        if file_id:
            details["file_id"] = file_id
        self.unique_key = unique_key
        super().__init__("File not found or has been removed", details)


class AccessDeniedError(FileShareException):
    """Raised when an identity touches a file or path it does not own."""

    def __init__(self, message: str, user_id: str | None = None, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        if user_id:
            details["user_id"] = user_id
        super().__init__(message, details)
