"""
API dependency injection.

Sandi Metz Principles:
- Single Responsibility: Dependency creation and injection
- Dependency Inversion: Create dependencies from abstractions
"""

from fastapi import Request

from xiq.services.orchestrator import RequestOrchestrator


async def get_orchestrator(request: Request) -> RequestOrchestrator:
    """
    Get the orchestrator built at startup.

    Args:
        request: FastAPI request

    Returns:
        Request orchestrator
    """
    return request.app.state.app_state.orchestrator


def get_client_ip(request: Request) -> str:
    """
    Get the client address.

    Uses the first X-Forwarded-For entry when behind a proxy.

    Args:
        request: FastAPI request

    Returns:
        Client address, "ip:unknown" if none is known
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "ip:unknown"
