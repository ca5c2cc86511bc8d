"""
API Request Logging Middleware.

One structured log line per served request with the handle, cache result
and limiter headers, correlated by a request id.

Sandi Metz Principles:
- Single Responsibility: Request/response logging
- Non-intrusive: Only adds the X-Request-ID header
- Configurable: Excluded paths and slow request threshold
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from xiq.api.deps import get_client_ip
from xiq.utils.logger import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    enabled: bool = True
    excluded_paths: List[str] = field(
        default_factory=lambda: ["/health", "/healthz", "/ready", "/live"]
    )
    slow_request_threshold_ms: float = 1000.0


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for request/response logging.

    The request id is bound to the structlog context so pipeline logs
    emitted while serving the request carry it too.
    """

    def __init__(self, app, config: Optional[LoggingConfig] = None):
        """
        Initialize middleware.

        Args:
            app: FastAPI application
            config: Logging configuration
        """
        super().__init__(app)
        self._config = config or LoggingConfig()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Serve request, logging its outcome.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response with X-Request-ID header
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        if not self._should_log(request.url.path):
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        structlog.contextvars.bind_contextvars(request_id=request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                **self._request_context(request),
                duration_ms=self._elapsed_ms(started),
                error=str(e),
            )
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        self._log_response(request, response, self._elapsed_ms(started), request_id)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    def _should_log(self, path: str) -> bool:
        return self._config.enabled and path not in self._config.excluded_paths

    def _request_context(self, request: Request) -> Dict[str, Any]:
        return {
            "method": request.method,
            "path": request.url.path,
            "username": request.query_params.get("username"),
            "client": get_client_ip(request),
        }

    def _log_response(
        self, request: Request, response: Response, duration_ms: float, request_id: str
    ) -> None:
        context = {
            **self._request_context(request),
            "request_id": request_id,
            "status": response.status_code,
            "cache": response.headers.get("x-cache"),
            "retry_after": response.headers.get("retry-after"),
            "duration_ms": duration_ms,
        }

        if response.status_code >= 500:
            logger.error("Request completed with server error", **context)
        elif response.status_code == 429:
            logger.warning("Request rate limited", **context)
        elif duration_ms > self._config.slow_request_threshold_ms:
            logger.warning("Slow request detected", **context)
        else:
            logger.info("Request completed", **context)

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)


# Default configuration
default_logging_config = LoggingConfig(slow_request_threshold_ms=1000.0)
