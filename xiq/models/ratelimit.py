"""
Rate limiting models.

Sandi Metz Principles:
- Small classes with clear purpose
- Immutable rate limit data
- Clear naming conventions
"""

from pydantic import BaseModel, ConfigDict, Field

from xiq.models.keys import LimiterClass


class RateLimitConfig(BaseModel):
    """Sliding window configuration for one limiter class."""

    model_config = ConfigDict(frozen=True)

    limit: int = Field(..., ge=1, description="Requests allowed per window")
    window_seconds: int = Field(..., ge=1, description="Time window in seconds")
    fail_closed: bool = Field(
        default=False, description="Deny instead of allow when the store errors"
    )

    @classmethod
    def per_minutes(cls, limit: int, minutes: int) -> "RateLimitConfig":
        """Create a limit over a window of whole minutes."""
        return cls(limit=limit, window_seconds=minutes * 60)

    @property
    def window_minutes(self) -> int:
        """Get window size in minutes."""
        return self.window_seconds // 60


class WindowResult(BaseModel):
    """Result of one atomic sliding window hit against the store."""

    allowed: bool = Field(..., description="Whether the hit was recorded")
    count: int = Field(..., ge=0, description="Permitted hits in window")


class LimitResult(BaseModel):
    """Limiter decision for one subject."""

    limiter: LimiterClass = Field(..., description="Limiter class")
    allowed: bool = Field(..., description="Whether one more unit is allowed")
    count: int = Field(default=0, ge=0, description="Permitted hits in window")
    limit: int = Field(default=0, ge=0, description="Window capacity")
    degraded: bool = Field(
        default=False, description="Decision made without the store"
    )

    @property
    def remaining(self) -> int:
        """Get remaining units in the window."""
        return max(0, self.limit - self.count)
