"""
Share key, storage path and share link helpers.

Share keys are short URL-safe tokens acting as bearer capabilities for a
file. Storage paths locate the blob in the object store and are distinct
from the share key.

Dependencies: secrets (stdlib)
System role: Identity of shared files
"""

import re
import secrets

SHARE_KEY_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"
MIN_SHARE_KEY_LENGTH = 10

_SHARE_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def generate_share_key(length: int = MIN_SHARE_KEY_LENGTH) -> str:
    """
    Generate a random share key.

    Args:
        length: Number of characters, at least MIN_SHARE_KEY_LENGTH

    Returns:
        str: Key drawn from SHARE_KEY_ALPHABET

    Raises:
        ValueError: If length is below the minimum
    """
    if length < MIN_SHARE_KEY_LENGTH:
        raise ValueError(
            f"Share keys need at least {MIN_SHARE_KEY_LENGTH} characters, got {length}"
        )
    return "".join(secrets.choice(SHARE_KEY_ALPHABET) for _ in range(length))


def is_valid_share_key(key: str) -> bool:
    """Check a key has a plausible shape before querying for it."""
    return bool(key) and len(key) <= 64 and bool(_SHARE_KEY_RE.match(key))


def build_storage_path(user_id: str, share_key: str, filename: str) -> str:
    """
    Compose the storage path of an uploaded blob.

    Format: {user_id}/{share_key}-{filename}

    Args:
        user_id: Owning identity
        share_key: Generated share key
        filename: Original filename (path separators replaced)

    Returns:
        str: Storage path, unique because the share key is
    """
    safe_name = filename.replace("/", "_").replace("\\", "_").strip() or "file"
    return f"{user_id}/{share_key}-{safe_name}"


def build_share_link(origin: str, share_key: str) -> str:
    """Build the public download link `<origin>/download/<key>`."""
    return f"{origin.rstrip('/')}/download/{share_key}"
