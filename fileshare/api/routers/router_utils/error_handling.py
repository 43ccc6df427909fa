"""
File view error handling utilities.

Provides a decorator for consistent error handling across file and auth
endpoints. Every failure becomes an HTTPException whose detail is a
destructive Notification: the backend's own message when there is one,
the view's default description otherwise.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from fileshare.core.exceptions import (
    AccessDeniedError,
    AuthenticationRequiredError,
    AuthServiceError,
    BackendError,
    FileRecordNotFoundError,
)
from fileshare.models.common import Notification
from fileshare.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def _notification_error(status_code: int, title: str, description: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=Notification.error(title, description).model_dump(),
    )


def _auth_status(e: AuthServiceError) -> int:
    """401 for rejected tokens, 400 for other rejections, 502 when the service failed."""
    if e.status_code == 401:
        return status.HTTP_401_UNAUTHORIZED
    if e.status_code is not None and 400 <= e.status_code < 500:
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_502_BAD_GATEWAY


def handle_file_errors(title: str = "Error", default_description: str = "Something went wrong") -> Callable[[F], F]:
    """
    Decorator factory mapping domain errors to HTTPExceptions.

    This centralizes:
    - Logging of errors with context
    - Mapping specific exceptions to HTTP status codes
    - Uniform Notification payloads in `detail`

    Args:
        title: Notification title on failure
        default_description: Description used when the error carries no message

    Returns:
        Callable: Decorator for async endpoint functions
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)

            except HTTPException:
                raise

            except FileRecordNotFoundError as e:
                logger.warning("File not found", extra={"unique_key": e.unique_key})
                raise _notification_error(status.HTTP_404_NOT_FOUND, "File not found", e.message)

            except AccessDeniedError as e:
                logger.warning("Access denied", extra={"error": str(e)})
                raise _notification_error(status.HTTP_403_FORBIDDEN, title, e.message)

            except AuthenticationRequiredError as e:
                raise _notification_error(
                    status.HTTP_401_UNAUTHORIZED, title, e.message or "You must be logged in"
                )

            except AuthServiceError as e:
                logger.warning(
                    "Auth service error",
                    extra={"operation": e.operation, "status_code": e.status_code, "error": e.message},
                )
                raise _notification_error(_auth_status(e), title, e.message or default_description)

            except BackendError as e:
                logger.error(
                    "Backend call failed",
                    extra={"operation": e.operation, "error": str(e)},
                )
                raise _notification_error(
                    status.HTTP_502_BAD_GATEWAY, title, e.message or default_description
                )

            except Exception as e:
                log_exception_with_context(logger, "Unexpected failure in file operation", e, view=title)
                raise _notification_error(
                    status.HTTP_500_INTERNAL_SERVER_ERROR, title, default_description
                )

        return wrapper  # type: ignore

    return decorator
