"""
Shared key-value store interface.

Sandi Metz Principles:
- Interface Segregation: Only what cache, limiter and cooldown need
- Dependency Inversion: Components depend on this, not on Redis
"""

from abc import ABC, abstractmethod
from typing import Optional

from xiq.models.ratelimit import WindowResult


class KeyValueStore(ABC):
    """
    Abstract shared store.

    Implementations raise StoreError when the backend cannot be reached.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value for key.

        Args:
            key: Store key

        Returns:
            Stored value, None if missing or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """
        Set value with expiry, overwriting any previous value.

        Args:
            key: Store key
            value: Value to store
            ttl_seconds: Time-to-live in seconds
        """
        pass

    @abstractmethod
    async def hit_window(
        self, key: str, window_seconds: int, capacity: int
    ) -> WindowResult:
        """
        Atomically record one hit in a sliding window if capacity allows.

        Args:
            key: Window key
            window_seconds: Trailing window length
            capacity: Hits allowed inside the window

        Returns:
            Whether the hit was recorded and the resulting count
        """
        pass

    @abstractmethod
    def now(self) -> float:
        """Current time in epoch seconds as seen by this store."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check store connectivity."""
        pass

    async def close(self) -> None:
        """Release store resources."""
        return None
