"""
Models package for xiq.

Exports all model classes for easy imports throughout the application.
"""

# Account and post models
from xiq.models.entity import (
    EntityRecord,
    Post,
    PostsBody,
    ProfileBody,
    PublicMetrics,
    SearchResult,
    Timeline,
)

# Error models
from xiq.models.error import ErrorResponse

# Health models
from xiq.models.health import ComponentHealth, DetailedHealthResponse, HealthResponse

# Store key models
from xiq.models.keys import CacheKey, CacheOperation, LimiterClass, UpstreamOperation

# LLM models
from xiq.models.llm import ChatMessage, LLMRequest, LLMResponse

# Outcome models
from xiq.models.outcome import Outcome, OutcomeStatus

# Rate limiting models
from xiq.models.ratelimit import LimitResult, RateLimitConfig, WindowResult

# Score models
from xiq.models.score import ParsedScore, ScoreResult

__all__ = [
    # Accounts
    "EntityRecord",
    "Post",
    "PostsBody",
    "ProfileBody",
    "PublicMetrics",
    "SearchResult",
    "Timeline",
    # Errors
    "ErrorResponse",
    # Health
    "ComponentHealth",
    "DetailedHealthResponse",
    "HealthResponse",
    # Keys
    "CacheKey",
    "CacheOperation",
    "LimiterClass",
    "UpstreamOperation",
    # LLM
    "ChatMessage",
    "LLMRequest",
    "LLMResponse",
    # Outcomes
    "Outcome",
    "OutcomeStatus",
    # Rate limiting
    "LimitResult",
    "RateLimitConfig",
    "WindowResult",
    # Score
    "ParsedScore",
    "ScoreResult",
]
