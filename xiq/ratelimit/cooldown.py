"""
Upstream cooldown tracking.

Sandi Metz Principles:
- Single Responsibility: Remember upstream overload per operation
- Small methods: Each method < 10 lines
- Dependency Injection: Store injected
"""

import math
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from xiq.exceptions import StoreError, UpstreamRateLimitError
from xiq.models.keys import UpstreamOperation, cooldown_key
from xiq.repositories.base import KeyValueStore
from xiq.utils.logger import get_logger

logger = get_logger(__name__)


class CooldownTracker:
    """
    Self-expiring per-operation overload flags.

    A flag stores the epoch second at which the upstream is assumed
    healthy again and expires from the store at that moment. Flags are
    never cleared early.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore],
        fallback_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize tracker.

        Args:
            store: Shared store, None when no store is configured
            fallback_seconds: Cooldown used when upstream gives no reset time
            clock: Time source used when no store is configured
        """
        self._store = store
        self._fallback = fallback_seconds
        self._clock = clock

    @property
    def fallback_seconds(self) -> int:
        """Get fallback cooldown duration."""
        return self._fallback

    async def is_on_cooldown(self, operation: UpstreamOperation) -> Optional[int]:
        """
        Get remaining cooldown for an upstream operation.

        Args:
            operation: Upstream operation

        Returns:
            Remaining whole seconds, None if not on cooldown
        """
        if self._store is None:
            return None

        try:
            value = await self._store.get(cooldown_key(operation))
        except StoreError as e:
            logger.warning("Cooldown check degraded", operation=operation.value, error=str(e))
            return None

        if value is None:
            return None

        try:
            until = float(value)
        except ValueError:
            logger.warning("Malformed cooldown flag", operation=operation.value, value=value)
            return None

        remaining = math.ceil(until - self._now())
        return remaining if remaining > 0 else None

    async def trip(self, operation: UpstreamOperation, duration_seconds: int) -> bool:
        """
        Put an upstream operation on cooldown.

        Args:
            operation: Upstream operation that signalled overload
            duration_seconds: Cooldown length

        Returns:
            True if recorded, False if skipped or failed
        """
        if self._store is None:
            return False

        duration = max(1, int(duration_seconds))
        until = self._now() + duration
        try:
            await self._store.set(cooldown_key(operation), str(until), duration)
        except StoreError as e:
            logger.error("Cooldown trip failed", operation=operation.value, error=str(e))
            return False

        logger.warning("Upstream cooldown started", operation=operation.value, seconds=duration)
        return True

    async def ensure_available(self, operation: UpstreamOperation) -> None:
        """
        Fail fast if an upstream operation is on cooldown.

        Args:
            operation: Upstream operation about to be called

        Raises:
            UpstreamRateLimitError: If the operation is on cooldown
        """
        remaining = await self.is_on_cooldown(operation)
        if remaining is None:
            return

        reset_at = datetime.fromtimestamp(
            self._now() + remaining, tz=timezone.utc
        )
        raise UpstreamRateLimitError(
            operation.value,
            retry_after=remaining,
            reset_at=reset_at,
            from_upstream=False,
        )

    def retry_after_for(self, reset_epoch: Optional[int]) -> int:
        """
        Derive cooldown length from the upstream's advertised reset.

        Args:
            reset_epoch: Upstream reset time in epoch seconds, if advertised

        Returns:
            Seconds until retry, at least 1
        """
        if reset_epoch is None:
            return self._fallback
        return max(1, int(reset_epoch - math.floor(self._now())))

    def _now(self) -> float:
        if self._store is None:
            return self._clock()
        return self._store.now()
