"""
Handle normalization utilities.

Sandi Metz Principles:
- Single Responsibility: Handle canonicalization
- Small functions: Each does one thing
- Pure functions: No side effects
"""

import re
from typing import Optional

from xiq.exceptions import InvalidHandleError

HANDLE_PATTERN = re.compile(r"^[a-z0-9_]{1,15}$")


def normalize_handle(handle: str) -> str:
    """
    Normalize handle for comparison.

    Args:
        handle: Raw handle as supplied by the caller

    Returns:
        Normalized handle (leading "@" removed, trimmed, lowercase)
    """
    stripped = handle.strip()
    if stripped.startswith("@"):
        stripped = stripped[1:]
    return stripped.strip().lower()


def require_handle(handle: Optional[str]) -> str:
    """
    Normalize and validate a handle.

    Args:
        handle: Raw handle, possibly missing

    Returns:
        Normalized handle

    Raises:
        InvalidHandleError: If the handle is missing or not a valid X handle
    """
    if handle is None or not handle.strip():
        raise InvalidHandleError("username is required")

    normalized = normalize_handle(handle)
    if not HANDLE_PATTERN.match(normalized):
        raise InvalidHandleError("username is invalid")
    return normalized


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))
