"""Unit tests for the in-memory repository."""

import pytest

from xiq.repositories.memory_repository import InMemoryRepository
from tests.mocks.clock import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repository(clock):
    return InMemoryRepository(clock=clock)


class TestInMemoryValues:
    """Tests for value storage."""

    @pytest.mark.asyncio
    async def test_should_return_stored_value(self, repository):
        """Test get after set."""
        await repository.set("k", "v", 10)

        assert await repository.get("k") == "v"

    @pytest.mark.asyncio
    async def test_should_expire_value_after_ttl(self, repository, clock):
        """Test value disappears at its TTL."""
        await repository.set("k", "v", 10)
        clock.advance(10)

        assert await repository.get("k") is None

    @pytest.mark.asyncio
    async def test_should_overwrite_value(self, repository):
        """Test last write wins."""
        await repository.set("k", "old", 10)
        await repository.set("k", "new", 10)

        assert await repository.get("k") == "new"

    @pytest.mark.asyncio
    async def test_should_clear_everything(self, repository):
        """Test clear drops values."""
        await repository.set("k", "v", 10)
        repository.clear()

        assert await repository.get("k") is None


class TestInMemoryWindow:
    """Tests for sliding window hits."""

    @pytest.mark.asyncio
    async def test_should_deny_hit_over_capacity(self, repository):
        """Test capacity plus one is denied."""
        results = [await repository.hit_window("w", 60, 3) for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert results[-1].count == 3

    @pytest.mark.asyncio
    async def test_should_not_record_denied_hits(self, repository, clock):
        """Test denied hits do not extend the window."""
        for _ in range(3):
            await repository.hit_window("w", 60, 3)
        clock.advance(30)
        await repository.hit_window("w", 60, 3)
        clock.advance(30)

        result = await repository.hit_window("w", 60, 3)

        assert result.allowed is True
        assert result.count == 1

    @pytest.mark.asyncio
    async def test_should_allow_again_after_window(self, repository, clock):
        """Test window slides."""
        for _ in range(3):
            await repository.hit_window("w", 60, 3)
        clock.advance(61)

        assert (await repository.hit_window("w", 60, 3)).allowed is True

    @pytest.mark.asyncio
    async def test_should_ping(self, repository):
        """Test ping always succeeds."""
        assert await repository.ping() is True


class TestInMemorySweep:
    """Tests for reclaiming expired entries."""

    @pytest.mark.asyncio
    async def test_should_drop_idle_windows_and_expired_values(self, repository, clock):
        """Test stale clients and handles are forgotten."""
        for i in range(1000):
            await repository.hit_window(f"ip:{i}", 600, 60)
            await repository.set(f"cache:{i}", "v", 3600)
        clock.advance(100_000)

        await repository.hit_window("ip:new", 600, 60)
        await repository.set("cache:new", "v", 3600)

        assert repository.entry_count() == 2

    @pytest.mark.asyncio
    async def test_should_keep_live_entries_on_sweep(self, repository, clock):
        """Test sweep only reclaims expired entries."""
        await repository.set("short", "v", 30)
        await repository.set("long", "v", 3600)
        await repository.hit_window("w", 600, 3)
        clock.advance(120)

        await repository.set("other", "v", 10)

        assert await repository.get("long") == "v"
        assert (await repository.hit_window("w", 600, 3)).count == 2
        assert repository.entry_count() == 3

    @pytest.mark.asyncio
    async def test_should_not_keep_empty_window_when_denied(self, repository):
        """Test zero capacity leaves nothing behind."""
        result = await repository.hit_window("w", 60, 0)

        assert result.allowed is False
        assert repository.entry_count() == 0
