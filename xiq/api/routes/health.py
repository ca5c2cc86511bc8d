"""
Health check endpoints.

Liveness never touches dependencies; readiness probes the shared store
and checks that upstream credentials are configured.
"""

import time
from typing import Dict

from fastapi import APIRouter, Request

from xiq.config import APP_VERSION, AppConfig, config
from xiq.models.health import ComponentHealth, DetailedHealthResponse, HealthResponse
from xiq.repositories.memory_repository import InMemoryRepository
from xiq.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


async def check_store_health(request: Request) -> ComponentHealth:
    """
    Probe the shared store.

    Without a store the service runs uncached in development and refuses
    requests in production.

    Args:
        request: Current request

    Returns:
        Store readiness
    """
    app_state = getattr(request.app.state, "app_state", None)
    if app_state is None:
        return ComponentHealth(status="unhealthy", message="App state not initialized")

    store = app_state.store
    if store is None:
        status = "unhealthy" if app_state.settings.is_production else "degraded"
        return ComponentHealth(
            status=status, backend="none", message="Caching and rate limits disabled"
        )

    backend = "memory" if isinstance(store, InMemoryRepository) else "redis"
    started = time.perf_counter()
    if not await store.ping():
        logger.warning("Store ping failed", backend=backend)
        return ComponentHealth(status="unhealthy", backend=backend, message="Ping failed")

    latency = round((time.perf_counter() - started) * 1000, 2)
    return ComponentHealth(status="healthy", backend=backend, latency_ms=latency)


def check_credentials(settings: AppConfig) -> Dict[str, ComponentHealth]:
    """
    Check upstream credentials.

    A missing X token breaks every operation; a missing model key only
    breaks the score operation.

    Args:
        settings: Application configuration

    Returns:
        Readiness of the X API and the score model
    """
    x_api = (
        ComponentHealth(status="healthy", backend="x-api-v2")
        if settings.x_bearer_token
        else ComponentHealth(status="unhealthy", message="X_BEARER_TOKEN not set")
    )
    llm = (
        ComponentHealth(status="healthy", backend=settings.score_model)
        if settings.openai_api_key
        else ComponentHealth(status="degraded", message="OPENAI_API_KEY not set")
    )
    return {"x_api": x_api, "llm": llm}


def _settings(request: Request) -> AppConfig:
    app_state = getattr(request.app.state, "app_state", None)
    return app_state.settings if app_state else config


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Liveness check.

    Returns:
        Health status response
    """
    return HealthResponse(
        status="healthy",
        environment=_settings(request).app_env,
        version=APP_VERSION,
    )


@router.get("/healthz", response_model=HealthResponse)
async def kubernetes_health_check(request: Request) -> HealthResponse:
    """Kubernetes-style liveness alias."""
    return await health_check(request)


@router.get("/live", response_model=HealthResponse)
async def liveness_check(request: Request) -> HealthResponse:
    """Kubernetes liveness probe alias."""
    return await health_check(request)


@router.get("/ready", response_model=DetailedHealthResponse)
async def readiness_check(request: Request) -> DetailedHealthResponse:
    """
    Readiness check.

    Returns:
        Worst component status with per-component detail
    """
    settings = _settings(request)
    components = {
        "store": await check_store_health(request),
        **check_credentials(settings),
    }
    return DetailedHealthResponse(
        status=DetailedHealthResponse.overall(components),
        environment=settings.app_env,
        version=APP_VERSION,
        components=components,
    )
