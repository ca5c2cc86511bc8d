"""
Main FastAPI application.

Following Sandi Metz:
- Single Responsibility: Application setup and configuration
- Small methods: Each lifecycle stage isolated
- Clear naming: Descriptive function names
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xiq.api.middleware import RequestLoggingMiddleware, default_logging_config
from xiq.api.routes import health, x
from xiq.cache.response_cache import ResponseCache
from xiq.config import APP_VERSION, AppConfig, config
from xiq.llm.openai_provider import OpenAIProvider
from xiq.llm.score_estimator import ScoreEstimator
from xiq.ratelimit.cooldown import CooldownTracker
from xiq.ratelimit.limiter import RateLimiterSet
from xiq.repositories.base import KeyValueStore
from xiq.repositories.memory_repository import InMemoryRepository
from xiq.repositories.redis_repository import RedisRepository, create_redis_pool
from xiq.services.orchestrator import RequestOrchestrator
from xiq.upstream.x_client import XClient
from xiq.utils.logger import get_logger, setup_logging

setup_logging(config.log_level, json_logs=config.log_json)
logger = get_logger(__name__)


def create_store(settings: AppConfig) -> Optional[KeyValueStore]:
    """
    Create the shared store for the configured backend.

    Args:
        settings: Application configuration

    Returns:
        Store, None when no store is configured
    """
    if settings.has_redis:
        return RedisRepository(create_redis_pool(settings))
    if settings.use_memory_store:
        logger.warning("Using process-local store; limits are per worker")
        return InMemoryRepository()
    return None


class ApplicationState:
    """
    Manages application-wide state.

    Single Responsibility: Lifecycle management of shared resources.
    """

    def __init__(self, settings: AppConfig) -> None:
        self.settings = settings
        self.store: Optional[KeyValueStore] = None
        self.x_client: Optional[XClient] = None
        self.orchestrator: Optional[RequestOrchestrator] = None

    async def startup(self) -> None:
        """Initialize application resources."""
        settings = self.settings
        logger.info("Starting xiq", env=settings.app_env)

        self.store = create_store(settings)
        if self.store is None:
            if settings.is_production:
                logger.error("No shared store configured; refusing all requests")
            else:
                logger.warning("No shared store configured; caching and limits disabled")

        self.x_client = XClient(
            settings.x_bearer_token,
            base_url=settings.x_api_base_url,
            timeout=settings.x_timeout_seconds,
        )
        self.orchestrator = RequestOrchestrator(
            cache=ResponseCache(self.store),
            limiters=RateLimiterSet.from_config(settings, self.store),
            cooldowns=CooldownTracker(self.store, settings.cooldown_fallback_seconds),
            x_client=self.x_client,
            score_estimator=ScoreEstimator(
                OpenAIProvider(settings.openai_api_key), settings.score_model
            ),
            settings=settings,
        )
        logger.info("xiq started successfully")

    async def shutdown(self) -> None:
        """Cleanup application resources."""
        logger.info("Shutting down xiq")
        try:
            if self.orchestrator:
                await self.orchestrator.aclose()
            if self.x_client:
                await self.x_client.close()
            if self.store:
                await self.store.close()
            logger.info("xiq shut down successfully")
        except Exception as e:
            logger.error("Error during shutdown", error=str(e))


def create_application(settings: AppConfig = config) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application configuration

    Returns:
        Configured FastAPI application instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        state = ApplicationState(settings)
        await state.startup()
        app.state.app_state = state

        yield

        await state.shutdown()

    app = FastAPI(
        title=settings.app_name,
        version=APP_VERSION,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # Add middleware (order matters - first added is last executed)
    app.add_middleware(
        RequestLoggingMiddleware,
        config=default_logging_config,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Cache", "Retry-After"],
    )

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(x.router, prefix="/api/x", tags=["x"])

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "xiq.main:app",
        host=config.api_host,
        port=config.api_port,
        reload=config.is_development,
    )
