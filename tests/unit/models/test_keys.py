"""Unit tests for store key models."""

import pytest
from pydantic import ValidationError

from xiq.models.keys import (
    CacheKey,
    CacheOperation,
    LimiterClass,
    UpstreamOperation,
    cooldown_key,
    rate_limit_key,
)


class TestCacheKey:
    """Tests for CacheKey."""

    def test_should_serialize_without_param(self):
        """Test key layout without parameter."""
        key = CacheKey.build(CacheOperation.PROFILE, "@Jack")

        assert key.serialize() == "cache:xprofile:jack"

    def test_should_serialize_with_param(self):
        """Test key layout with parameter."""
        key = CacheKey.build(CacheOperation.POSTS, "jack", 25)

        assert key.serialize() == "cache:xposts:jack:25"

    def test_should_build_equal_keys_for_handle_variants(self):
        """Test handle variants share a key."""
        keys = {
            CacheKey.build(CacheOperation.SCORE_LATEST, raw).serialize()
            for raw in ("@Jack", "jack ", "JACK")
        }

        assert keys == {"cache:iq-latest:jack"}

    def test_should_keep_operations_apart(self):
        """Test different operations never share a key."""
        profile = CacheKey.build(CacheOperation.PROFILE, "jack").serialize()
        score = CacheKey.build(CacheOperation.SCORE, "jack", "1").serialize()

        assert profile != score

    def test_should_be_immutable(self):
        """Test frozen key."""
        key = CacheKey.build(CacheOperation.PROFILE, "jack")

        with pytest.raises(ValidationError):
            key.handle = "other"


class TestStoreKeys:
    """Tests for limiter and cooldown keys."""

    def test_should_render_rate_limit_key(self):
        """Test limiter key layout."""
        assert rate_limit_key(LimiterClass.IP, "1.2.3.4") == "rl:ip:1.2.3.4"
        assert rate_limit_key(LimiterClass.GLOBAL, "global") == "rl:global:global"

    def test_should_render_cooldown_key(self):
        """Test cooldown key layout."""
        assert (
            cooldown_key(UpstreamOperation.CONTENT_TIMELINE)
            == "cooldown:x:v2UserTimeline"
        )
