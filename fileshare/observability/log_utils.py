"""
Logging utilities for safe structured logging.

Converts arbitrary context values into short strings and keeps credentials
(share keys excepted, they are identifiers) out of log output.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any

SENSITIVE_KEYS = frozenset(
    {"password", "access_token", "refresh_token", "token", "authorization", "apikey"}
)


def redact_token(token: str | None, visible: int = 4) -> str:
    """
    Mask all but the last few characters of a secret.

    Args:
        token: Secret to mask
        visible: Number of trailing characters left readable

    Returns:
        str: Masked value, "None" for a missing token
    """
    if not token:
        return "None"
    if len(token) <= visible:
        return "*" * len(token)
    return "*" * 8 + token[-visible:]


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Safely convert any value to a string for logging.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            val_str = value
        elif isinstance(value, (list, tuple, set)):
            val_str = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def _safe_context(context: dict[str, Any]) -> dict[str, str]:
    return {
        key: redact_token(str(val)) if key.lower() in SENSITIVE_KEYS else safe_log_value(val)
        for key, val in context.items()
    }


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, masking credentials.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Arbitrary key-value pairs attached as record attributes
    """
    logger.log(level, message, extra=_safe_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context,
) -> None:
    """
    Log an exception with full context.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Additional context
    """
    safe_context = _safe_context(context)
    safe_context.update({
        "error_type": type(exc).__name__,
        "error_msg": str(exc),
    })
    logger.exception(message, extra=safe_context)
