"""
Sliding window rate limiters.

Sandi Metz Principles:
- Single Responsibility: Decide whether one more unit is allowed
- Small methods: Each method < 10 lines
- Dependency Injection: Store and configuration injected
"""

from typing import Dict, Optional

from xiq.config import AppConfig
from xiq.exceptions import LocalRateLimitError, StoreError
from xiq.models.keys import LimiterClass, rate_limit_key
from xiq.models.ratelimit import LimitResult, RateLimitConfig
from xiq.repositories.base import KeyValueStore
from xiq.utils.logger import get_logger, log_rate_limited

logger = get_logger(__name__)


class SlidingWindowLimiter:
    """
    Store-backed sliding window limiter for one limiter class.

    Without a store every request is allowed.
    """

    def __init__(
        self,
        limiter: LimiterClass,
        config: RateLimitConfig,
        store: Optional[KeyValueStore],
    ):
        """
        Initialize limiter.

        Args:
            limiter: Limiter class this instance enforces
            config: Capacity and window
            store: Shared store, None when no store is configured
        """
        self._limiter = limiter
        self._config = config
        self._store = store

    @property
    def config(self) -> RateLimitConfig:
        """Get limiter configuration."""
        return self._config

    async def limit(self, subject: str) -> LimitResult:
        """
        Count one unit for subject.

        Args:
            subject: Client address, handle or "global"

        Returns:
            Limiter decision
        """
        if self._store is None:
            return self._degraded(allowed=True)

        key = rate_limit_key(self._limiter, subject)
        try:
            window = await self._store.hit_window(
                key, self._config.window_seconds, self._config.limit
            )
        except StoreError as e:
            allowed = not self._config.fail_closed
            logger.warning(
                "Rate limit check degraded",
                limiter=self._limiter.value,
                allowed=allowed,
                error=str(e),
            )
            return self._degraded(allowed=allowed)

        return LimitResult(
            limiter=self._limiter,
            allowed=window.allowed,
            count=window.count,
            limit=self._config.limit,
        )

    def _degraded(self, allowed: bool) -> LimitResult:
        return LimitResult(
            limiter=self._limiter,
            allowed=allowed,
            limit=self._config.limit,
            degraded=True,
        )


class RateLimiterSet:
    """
    The ip, handle and global limiters.

    Evaluated in that order; the first denial stops evaluation so later
    budgets are not consumed.
    """

    def __init__(self, limiters: Dict[LimiterClass, SlidingWindowLimiter]):
        """
        Initialize limiter set.

        Args:
            limiters: Limiter per class
        """
        self._limiters = limiters

    @classmethod
    def from_config(
        cls, settings: AppConfig, store: Optional[KeyValueStore]
    ) -> "RateLimiterSet":
        """
        Build the limiter set from application settings.

        Args:
            settings: Application configuration
            store: Shared store, None when no store is configured

        Returns:
            Limiter set
        """
        fail_closed = set(settings.fail_closed_limiters)
        windows = {
            LimiterClass.IP: (settings.ip_rate_limit, settings.ip_rate_window_seconds),
            LimiterClass.USER: (
                settings.user_rate_limit,
                settings.user_rate_window_seconds,
            ),
            LimiterClass.GLOBAL: (
                settings.global_rate_limit,
                settings.global_rate_window_seconds,
            ),
        }
        limiters = {
            limiter: SlidingWindowLimiter(
                limiter,
                RateLimitConfig(
                    limit=limit,
                    window_seconds=window,
                    fail_closed=limiter.value in fail_closed,
                ),
                store,
            )
            for limiter, (limit, window) in windows.items()
        }
        return cls(limiters)

    async def limit(self, limiter: LimiterClass, subject: str) -> LimitResult:
        """
        Count one unit for subject against one limiter class.

        Args:
            limiter: Limiter class
            subject: Subject key

        Returns:
            Limiter decision
        """
        return await self._limiters[limiter].limit(subject)

    async def enforce(self, client_ip: str, handle: str) -> None:
        """
        Run ip, handle and global limiters in order.

        Args:
            client_ip: Client address
            handle: Normalized handle

        Raises:
            LocalRateLimitError: On the first limiter that denies
        """
        subjects = (
            (LimiterClass.IP, client_ip),
            (LimiterClass.USER, handle),
            (LimiterClass.GLOBAL, "global"),
        )
        for limiter, subject in subjects:
            result = await self.limit(limiter, subject)
            if not result.allowed:
                log_rate_limited(limiter.value, subject, count=result.count)
                raise LocalRateLimitError(limiter.value)
