"""
Outcome to HTTP response mapping.

Sandi Metz Principles:
- Single Responsibility: Transport binding of outcomes
- Small functions: One builder per outcome shape
"""

from typing import Dict

from fastapi import Response

from xiq.models.error import ErrorResponse
from xiq.models.outcome import Outcome, OutcomeStatus

STATUS_CODES: Dict[OutcomeStatus, int] = {
    OutcomeStatus.SUCCESS: 200,
    OutcomeStatus.BAD_INPUT: 400,
    OutcomeStatus.NOT_FOUND: 404,
    OutcomeStatus.RATE_LIMITED: 429,
    OutcomeStatus.UPSTREAM_RATE_LIMITED: 429,
    OutcomeStatus.DERIVATION_FAILED: 502,
    OutcomeStatus.UNEXPECTED: 500,
    OutcomeStatus.SERVICE_UNAVAILABLE: 503,
}

JSON_CONTENT_TYPE = "application/json"
NO_STORE = "private, no-store"
STALE_WHILE_REVALIDATE_SECONDS = 300


def outcome_response(outcome: Outcome) -> Response:
    """
    Build HTTP response for an outcome.

    Args:
        outcome: Pipeline outcome

    Returns:
        JSON response with cache and retry headers
    """
    if outcome.is_success:
        return _success_response(outcome)
    return _error_response(outcome)


def _success_response(outcome: Outcome) -> Response:
    headers = {
        "x-cache": "HIT" if outcome.cache_hit else "MISS",
        "cache-control": (
            f"public, s-maxage={outcome.ttl_seconds}, "
            f"stale-while-revalidate={STALE_WHILE_REVALIDATE_SECONDS}"
        ),
    }
    return Response(
        content=outcome.body,
        status_code=200,
        media_type=JSON_CONTENT_TYPE,
        headers=headers,
    )


def _error_response(outcome: Outcome) -> Response:
    message = outcome.message or "Unexpected error"
    body = ErrorResponse(error=message)
    headers = {"cache-control": NO_STORE}

    if outcome.status == OutcomeStatus.UPSTREAM_RATE_LIMITED:
        headers["retry-after"] = str(outcome.retry_after)
        if outcome.upstream_flag:
            headers["x-upstream-rate-limited"] = "true"
        body = ErrorResponse.upstream_limited(message, outcome.reset_at)

    return Response(
        content=body.to_json(),
        status_code=STATUS_CODES[outcome.status],
        media_type=JSON_CONTENT_TYPE,
        headers=headers,
    )
