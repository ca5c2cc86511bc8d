"""
Shared store key models.

Sandi Metz Principles:
- Single Responsibility: One canonical serialization per key kind
- Immutable data: Keys are frozen once built
- Clear naming: Namespaces named after their owners
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from xiq.utils.handles import normalize_handle


class CacheOperation(str, Enum):
    """Cached operation namespaces."""

    PROFILE = "xprofile"
    POSTS = "xposts"
    SCORE = "iq"
    SCORE_LATEST = "iq-latest"


class UpstreamOperation(str, Enum):
    """Upstream X API operations with independent quotas."""

    USER_LOOKUP = "v2UserLookup"
    CONTENT_SEARCH = "v2TweetsSearchRecent"
    CONTENT_TIMELINE = "v2UserTimeline"


class LimiterClass(str, Enum):
    """Local rate limiter classes, in evaluation order."""

    IP = "ip"
    USER = "user"
    GLOBAL = "global"


class CacheKey(BaseModel):
    """Cache key: operation, normalized handle and an optional parameter."""

    model_config = ConfigDict(frozen=True)

    operation: CacheOperation = Field(..., description="Cached operation")
    handle: str = Field(..., min_length=1, description="Normalized handle")
    param: Optional[str] = Field(None, description="Operation parameter")

    @classmethod
    def build(
        cls,
        operation: CacheOperation,
        handle: str,
        param: Union[str, int, None] = None,
    ) -> "CacheKey":
        """Create key, normalizing the handle."""
        return cls(
            operation=operation,
            handle=normalize_handle(handle),
            param=None if param is None else str(param),
        )

    def serialize(self) -> str:
        """Render the store key."""
        parts = ["cache", self.operation.value, self.handle]
        if self.param is not None:
            parts.append(self.param)
        return ":".join(parts)


def rate_limit_key(limiter: LimiterClass, subject: str) -> str:
    """Render the store key of a rate limit window."""
    return f"rl:{limiter.value}:{subject}"


def cooldown_key(operation: UpstreamOperation) -> str:
    """Render the store key of an upstream cooldown flag."""
    return f"cooldown:x:{operation.value}"
