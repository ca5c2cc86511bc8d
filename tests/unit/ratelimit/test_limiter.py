"""Unit tests for sliding window limiters."""

from unittest.mock import AsyncMock

import pytest

from xiq.exceptions import LocalRateLimitError, StoreError
from xiq.models.keys import LimiterClass
from xiq.models.ratelimit import RateLimitConfig
from xiq.ratelimit.limiter import RateLimiterSet, SlidingWindowLimiter
from tests.mocks.factories import build_config


def failing_store():
    store = AsyncMock()
    store.hit_window.side_effect = StoreError("down")
    return store


class TestSlidingWindowLimiter:
    """Tests for SlidingWindowLimiter."""

    @pytest.mark.asyncio
    async def test_should_deny_after_capacity(self, memory_store):
        """Test capacity plus one request is denied."""
        limiter = SlidingWindowLimiter(
            LimiterClass.USER, RateLimitConfig(limit=3, window_seconds=60), memory_store
        )

        results = [await limiter.limit("jack") for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert results[2].remaining == 0

    @pytest.mark.asyncio
    async def test_should_recover_after_window(self, memory_store, clock):
        """Test subject is allowed once the window passes."""
        limiter = SlidingWindowLimiter(
            LimiterClass.USER, RateLimitConfig(limit=1, window_seconds=60), memory_store
        )
        await limiter.limit("jack")
        assert (await limiter.limit("jack")).allowed is False

        clock.advance(60)

        assert (await limiter.limit("jack")).allowed is True

    @pytest.mark.asyncio
    async def test_should_count_subjects_separately(self, memory_store):
        """Test windows are per subject."""
        limiter = SlidingWindowLimiter(
            LimiterClass.IP, RateLimitConfig(limit=1, window_seconds=60), memory_store
        )

        assert (await limiter.limit("1.1.1.1")).allowed is True
        assert (await limiter.limit("2.2.2.2")).allowed is True

    @pytest.mark.asyncio
    async def test_should_allow_without_store(self):
        """Test no-op limiter."""
        limiter = SlidingWindowLimiter(
            LimiterClass.GLOBAL, RateLimitConfig(limit=1, window_seconds=60), None
        )

        for _ in range(5):
            result = await limiter.limit("global")
            assert result.allowed is True
            assert result.degraded is True

    @pytest.mark.asyncio
    async def test_should_fail_open_on_store_error(self):
        """Test store error allows by default."""
        limiter = SlidingWindowLimiter(
            LimiterClass.IP, RateLimitConfig(limit=1, window_seconds=60), failing_store()
        )

        result = await limiter.limit("1.1.1.1")

        assert result.allowed is True
        assert result.degraded is True

    @pytest.mark.asyncio
    async def test_should_fail_closed_when_configured(self):
        """Test store error denies fail-closed limiter."""
        limiter = SlidingWindowLimiter(
            LimiterClass.GLOBAL,
            RateLimitConfig(limit=1, window_seconds=60, fail_closed=True),
            failing_store(),
        )

        assert (await limiter.limit("global")).allowed is False


class TestRateLimiterSet:
    """Tests for RateLimiterSet."""

    @pytest.mark.asyncio
    async def test_should_stop_at_first_denial(self, memory_store):
        """Test later limiters are not charged after a denial."""
        settings = build_config(ip_rate_limit=1, user_rate_limit=5, global_rate_limit=5)
        limiters = RateLimiterSet.from_config(settings, memory_store)

        await limiters.enforce("1.1.1.1", "jack")
        with pytest.raises(LocalRateLimitError) as exc_info:
            await limiters.enforce("1.1.1.1", "jack")

        assert exc_info.value.limiter == "ip"
        user = await limiters.limit(LimiterClass.USER, "jack")
        assert user.count == 2

    @pytest.mark.asyncio
    async def test_should_deny_by_handle(self, memory_store):
        """Test handle limiter across addresses."""
        settings = build_config(user_rate_limit=2)
        limiters = RateLimiterSet.from_config(settings, memory_store)

        await limiters.enforce("1.1.1.1", "jack")
        await limiters.enforce("2.2.2.2", "jack")
        with pytest.raises(LocalRateLimitError) as exc_info:
            await limiters.enforce("3.3.3.3", "jack")

        assert exc_info.value.limiter == "user"

    @pytest.mark.asyncio
    async def test_should_deny_globally(self, memory_store):
        """Test global limiter across handles."""
        settings = build_config(global_rate_limit=2)
        limiters = RateLimiterSet.from_config(settings, memory_store)

        await limiters.enforce("1.1.1.1", "a")
        await limiters.enforce("2.2.2.2", "b")
        with pytest.raises(LocalRateLimitError) as exc_info:
            await limiters.enforce("3.3.3.3", "c")

        assert exc_info.value.limiter == "global"

    @pytest.mark.asyncio
    async def test_should_apply_fail_closed_setting(self):
        """Test configured limiter denies on store error."""
        settings = build_config(rate_limit_fail_closed="user")
        limiters = RateLimiterSet.from_config(settings, failing_store())

        with pytest.raises(LocalRateLimitError) as exc_info:
            await limiters.enforce("1.1.1.1", "jack")

        assert exc_info.value.limiter == "user"
