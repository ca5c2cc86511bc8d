"""
In-memory repository.

Process-local stand-in for Redis, used for single-process development
and tests. Not shared between workers.
"""

import time
from collections import deque
from typing import Callable, Deque, Dict, Optional, Tuple

from xiq.models.ratelimit import WindowResult
from xiq.repositories.base import KeyValueStore
from xiq.utils.logger import get_logger

logger = get_logger(__name__)


class InMemoryRepository(KeyValueStore):
    """
    Dictionary-backed store with lazy expiry.

    Expired values and idle windows are swept at most once per
    `sweep_interval_seconds`, on writes and window hits.
    """

    def __init__(
        self, clock: Callable[[], float] = time.time, sweep_interval_seconds: float = 60.0
    ):
        """
        Initialize repository.

        Args:
            clock: Time source in epoch seconds
            sweep_interval_seconds: Minimum spacing between full sweeps
        """
        self._clock = clock
        self._sweep_interval = sweep_interval_seconds
        self._last_sweep = clock()
        self._values: Dict[str, Tuple[str, float]] = {}
        self._windows: Dict[str, Deque[float]] = {}
        self._spans: Dict[str, int] = {}

    def entry_count(self) -> int:
        """Number of stored values plus tracked windows."""
        return len(self._values) + len(self._windows)

    def now(self) -> float:
        return self._clock()

    async def get(self, key: str) -> Optional[str]:
        item = self._values.get(key)
        if item is None:
            return None

        value, expires_at = item
        if self._clock() >= expires_at:
            del self._values[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        now = self._clock()
        self._maybe_sweep(now)
        self._values[key] = (value, now + ttl_seconds)

    async def hit_window(
        self, key: str, window_seconds: int, capacity: int
    ) -> WindowResult:
        now = self._clock()
        self._maybe_sweep(now)
        hits = self._windows.get(key) or deque()
        self._prune(hits, now - window_seconds)

        if len(hits) >= capacity:
            self._keep_window(key, hits, window_seconds)
            return WindowResult(allowed=False, count=len(hits))

        hits.append(now)
        self._keep_window(key, hits, window_seconds)
        return WindowResult(allowed=True, count=len(hits))

    async def ping(self) -> bool:
        return True

    def clear(self) -> None:
        """Drop all values and windows."""
        self._values.clear()
        self._windows.clear()
        self._spans.clear()

    def _keep_window(self, key: str, hits: Deque[float], window_seconds: int) -> None:
        if hits:
            self._windows[key] = hits
            self._spans[key] = window_seconds
        else:
            self._windows.pop(key, None)
            self._spans.pop(key, None)

    @staticmethod
    def _prune(hits: Deque[float], cutoff: float) -> None:
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self._sweep_interval:
            return
        self._last_sweep = now

        expired = [k for k, (_, expires_at) in self._values.items() if now >= expires_at]
        for key in expired:
            del self._values[key]

        for key in list(self._windows):
            hits = self._windows[key]
            self._prune(hits, now - self._spans[key])
            self._keep_window(key, hits, self._spans[key])

        logger.debug(
            "In-memory store swept", expired=len(expired), remaining=self.entry_count()
        )
