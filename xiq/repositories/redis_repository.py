"""
Redis repository for shared state.

Sandi Metz Principles:
- Single Responsibility: Redis data access
- Small methods: Each operation isolated
- Dependency Injection: Redis pool injected
"""

import time
import uuid
from typing import Callable, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from xiq.config import AppConfig
from xiq.exceptions import StoreError
from xiq.models.ratelimit import WindowResult
from xiq.repositories.base import KeyValueStore
from xiq.utils.logger import get_logger

logger = get_logger(__name__)

# Prune, count, conditionally record and extend in one round trip.
SLIDING_WINDOW_SCRIPT = """
local key = KEYS[1]
local now_ms = tonumber(ARGV[1])
local window_ms = tonumber(ARGV[2])
local capacity = tonumber(ARGV[3])
local member = ARGV[4]
redis.call('ZREMRANGEBYSCORE', key, '-inf', now_ms - window_ms)
local count = redis.call('ZCARD', key)
if count < capacity then
  redis.call('ZADD', key, now_ms, member)
  redis.call('PEXPIRE', key, window_ms)
  return {1, count + 1}
end
return {0, count}
"""


def create_redis_pool(settings: AppConfig) -> ConnectionPool:
    """
    Create Redis connection pool.

    Args:
        settings: Application configuration

    Returns:
        Redis connection pool
    """
    return ConnectionPool.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        decode_responses=True,
    )


class RedisRepository(KeyValueStore):
    """
    Repository for Redis operations.

    Handles low-level Redis interactions.
    """

    def __init__(
        self, pool: ConnectionPool, clock: Callable[[], float] = time.time
    ):
        """
        Initialize repository.

        Args:
            pool: Redis connection pool
            clock: Time source in epoch seconds
        """
        self._pool = pool
        self._clock = clock

    def now(self) -> float:
        return self._clock()

    async def get(self, key: str) -> Optional[str]:
        try:
            async with Redis(connection_pool=self._pool) as client:
                return await client.get(key)
        except (RedisError, OSError) as e:
            logger.error("Redis get failed", key=key, error=str(e))
            raise StoreError(f"Redis get failed: {e}") from e

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            async with Redis(connection_pool=self._pool) as client:
                await client.set(key, value, ex=ttl_seconds)
        except (RedisError, OSError) as e:
            logger.error("Redis set failed", key=key, error=str(e))
            raise StoreError(f"Redis set failed: {e}") from e

    async def hit_window(
        self, key: str, window_seconds: int, capacity: int
    ) -> WindowResult:
        now_ms = int(self._clock() * 1000)
        member = f"{now_ms}:{uuid.uuid4().hex}"

        try:
            async with Redis(connection_pool=self._pool) as client:
                allowed, count = await client.eval(
                    SLIDING_WINDOW_SCRIPT,
                    1,
                    key,
                    now_ms,
                    window_seconds * 1000,
                    capacity,
                    member,
                )
        except (RedisError, OSError) as e:
            logger.error("Redis window hit failed", key=key, error=str(e))
            raise StoreError(f"Redis window hit failed: {e}") from e

        return WindowResult(allowed=bool(int(allowed)), count=int(count))

    async def ping(self) -> bool:
        try:
            async with Redis(connection_pool=self._pool) as client:
                await client.ping()
                return True
        except (RedisError, OSError) as e:
            logger.error("Redis ping failed", error=str(e))
            return False

    async def close(self) -> None:
        await self._pool.disconnect()
        logger.info("Redis pool closed")
