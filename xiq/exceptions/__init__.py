"""
Custom exceptions for the application.
"""

from datetime import datetime
from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""

    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid."""

    pass


class InvalidHandleError(AppError):
    """Raised when a handle is missing or malformed."""

    pass


class NotFoundError(AppError):
    """Raised when the upstream has no such account or no qualifying posts."""

    pass


class StoreError(AppError):
    """Raised when the shared store cannot be reached."""

    pass


class ServiceUnavailableError(AppError):
    """Raised when the shared store is required but not configured."""

    pass


class LocalRateLimitError(AppError):
    """Raised when one of the local limiters denies a request."""

    def __init__(self, limiter: str, message: str = "Too many requests"):
        super().__init__(message)
        self.limiter = limiter


class UpstreamError(AppError):
    """Raised when the upstream API fails for a reason other than rate limiting."""

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation


class UpstreamRateLimitError(AppError):
    """
    Raised when the upstream is rate limited.

    from_upstream is True when the upstream itself rejected the call and
    False when an active cooldown short-circuited it.
    """

    def __init__(
        self,
        operation: str,
        retry_after: Optional[int] = None,
        reset_at: Optional[datetime] = None,
        from_upstream: bool = True,
    ):
        super().__init__(f"Upstream {operation} rate limited")
        self.operation = operation
        self.retry_after = retry_after
        self.reset_at = reset_at
        self.from_upstream = from_upstream


class LLMProviderError(AppError):
    """Raised when LLM provider fails."""

    pass


class DerivationError(AppError):
    """Raised when no score can be recovered from model output."""

    pass
