"""Unit tests for outcome to HTTP mapping."""

import json
from datetime import datetime, timezone

import pytest

from xiq.api.responses import outcome_response
from xiq.models.keys import LimiterClass, UpstreamOperation
from xiq.models.outcome import Outcome, OutcomeStatus


class TestSuccessResponses:
    """Tests for success outcomes."""

    def test_should_mark_cache_hit(self):
        """Test hit headers and raw body."""
        response = outcome_response(Outcome.hit('{"user": {"id": "1"}}', 3600))

        assert response.status_code == 200
        assert response.body == b'{"user": {"id": "1"}}'
        assert response.headers["x-cache"] == "HIT"
        assert response.headers["cache-control"] == (
            "public, s-maxage=3600, stale-while-revalidate=300"
        )

    def test_should_mark_cache_miss(self):
        """Test miss header."""
        response = outcome_response(Outcome.miss("{}", 21600))

        assert response.headers["x-cache"] == "MISS"
        assert "s-maxage=21600" in response.headers["cache-control"]


class TestErrorResponses:
    """Tests for failure outcomes."""

    @pytest.mark.parametrize(
        "status,code",
        [
            (OutcomeStatus.BAD_INPUT, 400),
            (OutcomeStatus.NOT_FOUND, 404),
            (OutcomeStatus.DERIVATION_FAILED, 502),
            (OutcomeStatus.UNEXPECTED, 500),
            (OutcomeStatus.SERVICE_UNAVAILABLE, 503),
        ],
    )
    def test_should_map_status_codes(self, status, code):
        """Test status mapping and error body."""
        response = outcome_response(Outcome.failure(status, "nope"))

        assert response.status_code == code
        assert json.loads(response.body) == {"error": "nope"}
        assert response.headers["cache-control"] == "private, no-store"
        assert "x-cache" not in response.headers

    def test_should_map_local_rate_limit(self):
        """Test local limiter denial."""
        response = outcome_response(
            Outcome.failure(
                OutcomeStatus.RATE_LIMITED,
                "Too many requests",
                limiter=LimiterClass.IP,
            )
        )

        assert response.status_code == 429
        assert json.loads(response.body) == {"error": "Too many requests"}
        assert "retry-after" not in response.headers

    def test_should_flag_upstream_rate_limit(self):
        """Test upstream rejection headers and reset time."""
        response = outcome_response(
            Outcome.failure(
                OutcomeStatus.UPSTREAM_RATE_LIMITED,
                "X API rate limited",
                retry_after=42,
                reset_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
                upstream_flag=True,
                upstream_operation=UpstreamOperation.USER_LOOKUP,
            )
        )

        assert response.status_code == 429
        assert response.headers["retry-after"] == "42"
        assert response.headers["x-upstream-rate-limited"] == "true"
        assert json.loads(response.body) == {
            "error": "X API rate limited",
            "resetAt": "2024-01-01T12:00:00Z",
        }

    def test_should_not_flag_cooldown(self):
        """Test cooldown short-circuit omits upstream flag."""
        response = outcome_response(
            Outcome.failure(
                OutcomeStatus.UPSTREAM_RATE_LIMITED,
                "Upstream X API temporarily rate limited. Please retry later.",
                retry_after=10,
            )
        )

        assert response.headers["retry-after"] == "10"
        assert "x-upstream-rate-limited" not in response.headers
        assert "resetAt" not in json.loads(response.body)
