"""
Request outcome models.

Every pipeline path ends in exactly one Outcome; transports map
the status onto their own codes.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from xiq.models.keys import LimiterClass, UpstreamOperation


class OutcomeStatus(str, Enum):
    """Outcome status classes."""

    SUCCESS = "success"
    BAD_INPUT = "bad_input"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_RATE_LIMITED = "upstream_rate_limited"
    DERIVATION_FAILED = "derivation_failed"
    UNEXPECTED = "unexpected"
    SERVICE_UNAVAILABLE = "service_unavailable"


class Outcome(BaseModel):
    """Result of one orchestrated request."""

    status: OutcomeStatus = Field(..., description="Outcome class")
    body: Optional[str] = Field(None, description="Serialized success body")
    cache_hit: Optional[bool] = Field(None, description="Served from cache")
    ttl_seconds: Optional[int] = Field(None, description="Cache lifetime of body")
    message: Optional[str] = Field(None, description="Human readable error")
    retry_after: Optional[int] = Field(None, ge=0, description="Seconds until retry")
    reset_at: Optional[datetime] = Field(None, description="Upstream reset time")
    upstream_flag: bool = Field(
        default=False, description="Upstream itself rejected the call"
    )
    limiter: Optional[LimiterClass] = Field(None, description="Limiter that denied")
    upstream_operation: Optional[UpstreamOperation] = Field(
        None, description="Upstream operation on cooldown"
    )

    @classmethod
    def hit(cls, body: str, ttl_seconds: int) -> "Outcome":
        """Create cache hit outcome."""
        return cls(
            status=OutcomeStatus.SUCCESS,
            body=body,
            cache_hit=True,
            ttl_seconds=ttl_seconds,
        )

    @classmethod
    def miss(cls, body: str, ttl_seconds: int) -> "Outcome":
        """Create fresh (cache miss) outcome."""
        return cls(
            status=OutcomeStatus.SUCCESS,
            body=body,
            cache_hit=False,
            ttl_seconds=ttl_seconds,
        )

    @classmethod
    def failure(cls, status: OutcomeStatus, message: str, **kwargs) -> "Outcome":
        """Create failure outcome."""
        return cls(status=status, message=message, **kwargs)

    @property
    def is_success(self) -> bool:
        """Check if outcome carries a body."""
        return self.status == OutcomeStatus.SUCCESS
