"""Unit tests for the response cache."""

from unittest.mock import AsyncMock

import pytest

from xiq.cache.response_cache import ResponseCache
from xiq.exceptions import StoreError
from xiq.models.keys import CacheKey, CacheOperation


@pytest.fixture
def key():
    return CacheKey.build(CacheOperation.PROFILE, "jack")


class TestResponseCache:
    """Tests for ResponseCache."""

    @pytest.mark.asyncio
    async def test_should_return_stored_body(self, memory_store, key):
        """Test lookup after store."""
        cache = ResponseCache(memory_store)

        assert await cache.store(key, '{"user": {}}', 60) is True
        assert await cache.lookup(key) == '{"user": {}}'

    @pytest.mark.asyncio
    async def test_should_miss_after_ttl(self, memory_store, clock, key):
        """Test expired entry is a miss."""
        cache = ResponseCache(memory_store)
        await cache.store(key, "{}", 60)
        clock.advance(60)

        assert await cache.lookup(key) is None

    @pytest.mark.asyncio
    async def test_should_be_disabled_without_store(self, key):
        """Test no-op cache."""
        cache = ResponseCache(None)

        assert cache.enabled is False
        assert await cache.store(key, "{}", 60) is False
        assert await cache.lookup(key) is None

    @pytest.mark.asyncio
    async def test_should_treat_store_errors_as_miss(self, key):
        """Test failing store degrades to a miss."""
        store = AsyncMock()
        store.get.side_effect = StoreError("down")
        store.set.side_effect = StoreError("down")
        cache = ResponseCache(store)

        assert await cache.lookup(key) is None
        assert await cache.store(key, "{}", 60) is False

    @pytest.mark.asyncio
    async def test_should_be_idempotent(self, memory_store, key):
        """Test storing the same body twice."""
        cache = ResponseCache(memory_store)

        await cache.store(key, "{}", 60)
        await cache.store(key, "{}", 60)

        assert await cache.lookup(key) == "{}"
