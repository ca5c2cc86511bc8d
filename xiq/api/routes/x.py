"""
X account endpoints.

Sandi Metz Principles:
- Single Responsibility: HTTP request handling
- Small functions: Minimal logic in endpoints
- Dependency Injection: Orchestrator injected
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from xiq.api.deps import get_client_ip, get_orchestrator
from xiq.api.responses import outcome_response
from xiq.services.orchestrator import RequestOrchestrator

router = APIRouter()


@router.get("/profile")
async def get_profile(
    request: Request,
    username: Optional[str] = Query(None, description="X handle"),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),  # noqa: B008
) -> Response:
    """
    Get X profile for a handle.

    Args:
        request: HTTP request
        username: Handle, with or without "@"
        orchestrator: Request orchestrator (injected)

    Returns:
        JSON response
    """
    outcome = await orchestrator.lookup_profile(username, get_client_ip(request))
    return outcome_response(outcome)


@router.get("/posts")
async def get_posts(
    request: Request,
    username: Optional[str] = Query(None, description="X handle"),
    max_results: Optional[int] = Query(None, description="Posts to return (5-100)"),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),  # noqa: B008
) -> Response:
    """Get recent posts for a handle."""
    outcome = await orchestrator.fetch_posts(
        username, get_client_ip(request), max_results=max_results
    )
    return outcome_response(outcome)


@router.get("/iq")
async def get_iq(
    request: Request,
    username: Optional[str] = Query(None, description="X handle"),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),  # noqa: B008
) -> Response:
    """Estimate IQ from the handle's latest original post."""
    outcome = await orchestrator.compute_score(username, get_client_ip(request))
    return outcome_response(outcome)
