"""
Structured logging configuration.

Following Sandi Metz principles:
- Single Responsibility: Logging setup and configuration
- Small functions: Each setup step isolated
- Clear naming: Descriptive function names
"""

import logging
import sys
from typing import Any

import structlog


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structured logging.

    Pipeline events carry the request id bound by the request middleware.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines; otherwise a colourless console format
    """
    level = logging.getLevelName(log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


def log_cache_hit(key: str, **kwargs: Any) -> None:
    """
    Log cache hit.

    Args:
        key: Serialized cache key
        **kwargs: Additional context
    """
    logger = get_logger("cache")
    logger.info("cache_hit", key=key, **kwargs)


def log_cache_miss(key: str, **kwargs: Any) -> None:
    """
    Log cache miss.

    Args:
        key: Serialized cache key
        **kwargs: Additional context
    """
    logger = get_logger("cache")
    logger.info("cache_miss", key=key, **kwargs)


def log_rate_limited(limiter: str, subject: str, **kwargs: Any) -> None:
    """
    Log a local rate limit denial.

    Args:
        limiter: Limiter class that denied the request
        subject: Subject key (client address, handle, "global")
        **kwargs: Additional context
    """
    logger = get_logger("ratelimit")
    logger.warning("rate_limited", limiter=limiter, subject=subject, **kwargs)


def log_upstream_call(operation: str, **kwargs: Any) -> None:
    """
    Log an upstream X API call.

    Args:
        operation: Upstream operation name
        **kwargs: Additional context
    """
    logger = get_logger("upstream")
    logger.info("upstream_call", operation=operation, **kwargs)


def log_llm_call(provider: str, model: str, tokens: int, **kwargs: Any) -> None:
    """
    Log LLM API call.

    Args:
        provider: LLM provider name
        model: Model name
        tokens: Total tokens used
        **kwargs: Additional context
    """
    logger = get_logger("llm")
    logger.info("llm_call", provider=provider, model=model, tokens=tokens, **kwargs)


def log_error(error: Exception, context: str, **kwargs: Any) -> None:
    """
    Log error with context.

    Args:
        error: Exception that occurred
        context: Error context
        **kwargs: Additional context
    """
    logger = get_logger("error")
    logger.error(
        "error_occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context,
        **kwargs
    )
