"""
Response cache service.

Sandi Metz Principles:
- Single Responsibility: Cache operations orchestration
- Small methods: Each operation < 10 lines
- Dependency Injection: Store injected
"""

from typing import Optional

from xiq.exceptions import StoreError
from xiq.models.keys import CacheKey
from xiq.repositories.base import KeyValueStore
from xiq.utils.logger import get_logger, log_cache_hit, log_cache_miss

logger = get_logger(__name__)


class ResponseCache:
    """
    Cache of fully serialized success bodies.

    Caching is best-effort: store failures degrade to misses.
    """

    def __init__(self, store: Optional[KeyValueStore]):
        """
        Initialize cache service.

        Args:
            store: Shared store, None when no store is configured
        """
        self._store = store

    @property
    def enabled(self) -> bool:
        """Check if a store backs this cache."""
        return self._store is not None

    async def lookup(self, key: CacheKey) -> Optional[str]:
        """
        Get cached body for key.

        Args:
            key: Cache key

        Returns:
            Cached body if present and unexpired, None otherwise
        """
        if self._store is None:
            return None

        serialized = key.serialize()
        try:
            body = await self._store.get(serialized)
        except StoreError as e:
            logger.warning("Cache lookup degraded to miss", key=serialized, error=str(e))
            return None

        if body:
            log_cache_hit(serialized)
            return body

        log_cache_miss(serialized)
        return None

    async def store(self, key: CacheKey, body: str, ttl_seconds: int) -> bool:
        """
        Store body under key, overwriting any previous entry.

        Args:
            key: Cache key
            body: Serialized success body
            ttl_seconds: Time-to-live in seconds

        Returns:
            True if stored, False if skipped or failed
        """
        if self._store is None:
            return False

        serialized = key.serialize()
        try:
            await self._store.set(serialized, body, ttl_seconds)
        except StoreError as e:
            logger.error("Cache store failed", key=serialized, error=str(e))
            return False

        logger.info("Cache stored", key=serialized, ttl=ttl_seconds)
        return True
