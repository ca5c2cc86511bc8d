"""
Request orchestration service.

Runs each operation through cache check, rate limits, upstream cooldown,
upstream call, optional score derivation and cache write.

Sandi Metz Principles:
- Single Responsibility: Request orchestration
- Small methods: One method per pipeline stage
- Dependency Injection: Cache, limiters, cooldowns and clients injected
"""

import asyncio
from typing import Awaitable, Callable, Optional, Set, TypeVar

from xiq.cache.response_cache import ResponseCache
from xiq.config import AppConfig
from xiq.exceptions import (
    AppError,
    DerivationError,
    InvalidHandleError,
    LocalRateLimitError,
    NotFoundError,
    ServiceUnavailableError,
    UpstreamRateLimitError,
)
from xiq.llm.score_estimator import ScoreEstimator
from xiq.models.entity import EntityRecord, PostsBody, ProfileBody
from xiq.models.keys import CacheKey, CacheOperation, LimiterClass, UpstreamOperation
from xiq.models.outcome import Outcome, OutcomeStatus
from xiq.models.score import ScoreLLMInfo, ScorePost, ScoreResult, ScoreUser
from xiq.ratelimit.cooldown import CooldownTracker
from xiq.ratelimit.limiter import RateLimiterSet
from xiq.upstream.provider import BaseXClient
from xiq.utils.handles import clamp, require_handle
from xiq.utils.logger import get_logger, log_error

logger = get_logger(__name__)

T = TypeVar("T")

COOLDOWN_MESSAGE = "Upstream X API temporarily rate limited. Please retry later."
UPSTREAM_LIMIT_MESSAGE = "X API rate limited"
LOCAL_LIMIT_MESSAGE = "Too many requests"
STORE_REQUIRED_MESSAGE = "Service unavailable: caching and rate limits disabled"


class RequestOrchestrator:
    """
    Cache-first, rate-limited orchestrator for the X operations.

    Holds injected dependencies for its lifetime and no request state.
    """

    def __init__(
        self,
        cache: ResponseCache,
        limiters: RateLimiterSet,
        cooldowns: CooldownTracker,
        x_client: BaseXClient,
        score_estimator: ScoreEstimator,
        settings: AppConfig,
    ):
        """
        Initialize orchestrator.

        Args:
            cache: Response cache
            limiters: Ip, handle and global limiters
            cooldowns: Upstream cooldown tracker
            x_client: Upstream X API client
            score_estimator: Generative score step
            settings: Application configuration
        """
        self._cache = cache
        self._limiters = limiters
        self._cooldowns = cooldowns
        self._x = x_client
        self._estimator = score_estimator
        self._settings = settings
        self._inflight: Set[asyncio.Task] = set()

    async def lookup_profile(self, handle: Optional[str], client_ip: str) -> Outcome:
        """
        Resolve an account by handle.

        Args:
            handle: Raw handle
            client_ip: Client address

        Returns:
            Outcome with a {"user": ...} body on success
        """
        return await self._run("profile", lambda: self._lookup_profile(handle, client_ip))

    async def fetch_posts(
        self, handle: Optional[str], client_ip: str, max_results: Optional[int] = None
    ) -> Outcome:
        """
        Fetch recent posts of an account.

        Args:
            handle: Raw handle
            client_ip: Client address
            max_results: Requested page size, clamped to the configured bounds

        Returns:
            Outcome with a {"user", "tweets", "meta", "includes"} body on success
        """
        return await self._run(
            "posts", lambda: self._fetch_posts(handle, client_ip, max_results)
        )

    async def compute_score(self, handle: Optional[str], client_ip: str) -> Outcome:
        """
        Derive a score from the account's latest original post.

        Args:
            handle: Raw handle
            client_ip: Client address

        Returns:
            Outcome with a score body on success
        """
        return await self._run("score", lambda: self._compute_score(handle, client_ip))

    async def aclose(self) -> None:
        """Wait for background pipeline stages to finish."""
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)

    async def _lookup_profile(self, raw_handle: Optional[str], client_ip: str) -> Outcome:
        handle = self._admit(raw_handle)
        key = CacheKey.build(CacheOperation.PROFILE, handle)
        ttl = self._settings.profile_cache_ttl_seconds

        cached = await self._cache.lookup(key)
        if cached:
            return Outcome.hit(cached, ttl)

        await self._limiters.enforce(client_ip, handle)
        return await self._shielded(self._resolve_profile(handle, key, ttl))

    async def _resolve_profile(self, handle: str, key: CacheKey, ttl: int) -> Outcome:
        user: Optional[EntityRecord] = None

        if self._settings.profile_lookup_strategy == "search":
            query = f"from:{handle} -is:retweet -is:reply"
            result = await self._call_upstream(
                UpstreamOperation.CONTENT_SEARCH,
                lambda: self._x.search_recent(query, max_results=10),
            )
            user = result.first_author

        # Protected accounts and accounts without recent posts need a direct lookup.
        if user is None:
            user = await self._lookup_user(handle)

        body = ProfileBody(user=user).model_dump_json(exclude_none=True)
        await self._cache.store(key, body, ttl)
        return Outcome.miss(body, ttl)

    async def _fetch_posts(
        self, raw_handle: Optional[str], client_ip: str, max_results: Optional[int]
    ) -> Outcome:
        handle = self._admit(raw_handle)
        if max_results is None:
            max_results = self._settings.posts_default_max_results
        count = clamp(
            max_results,
            self._settings.posts_min_results,
            self._settings.posts_max_results,
        )
        key = CacheKey.build(CacheOperation.POSTS, handle, count)
        ttl = self._settings.posts_cache_ttl_seconds

        cached = await self._cache.lookup(key)
        if cached:
            return Outcome.hit(cached, ttl)

        await self._limiters.enforce(client_ip, handle)
        return await self._shielded(self._load_posts(handle, count, key, ttl))

    async def _load_posts(self, handle: str, count: int, key: CacheKey, ttl: int) -> Outcome:
        user = await self._lookup_user(handle)
        timeline = await self._call_upstream(
            UpstreamOperation.CONTENT_TIMELINE,
            lambda: self._x.user_timeline(
                user.id, count, exclude=("replies",), with_media=True
            ),
        )

        body = PostsBody(
            user=user,
            tweets=timeline.posts,
            meta=timeline.meta,
            includes=timeline.includes,
        ).model_dump_json(exclude_none=True)
        await self._cache.store(key, body, ttl)
        return Outcome.miss(body, ttl)

    async def _compute_score(self, raw_handle: Optional[str], client_ip: str) -> Outcome:
        handle = self._admit(raw_handle)
        latest_key = CacheKey.build(CacheOperation.SCORE_LATEST, handle)
        ttl = self._settings.score_cache_ttl_seconds

        cached = await self._cache.lookup(latest_key)
        if cached:
            return Outcome.hit(cached, ttl)

        await self._limiters.enforce(client_ip, handle)
        return await self._shielded(self._derive_score(handle, latest_key, ttl))

    async def _derive_score(self, handle: str, latest_key: CacheKey, ttl: int) -> Outcome:
        user = await self._lookup_user(handle)
        timeline = await self._call_upstream(
            UpstreamOperation.CONTENT_TIMELINE,
            lambda: self._x.user_timeline(user.id, 5, exclude=("replies", "retweets")),
        )

        latest = timeline.latest
        if latest is None:
            raise NotFoundError("no recent posts")

        post_key = CacheKey.build(CacheOperation.SCORE, handle, latest.id)
        cached = await self._cache.lookup(post_key)
        if cached:
            await self._cache.store(latest_key, cached, ttl)
            return Outcome.hit(cached, ttl)

        parsed, response = await self._estimator.estimate(latest.text)
        body = ScoreResult(
            user=ScoreUser(id=user.id, username=user.username),
            tweet=ScorePost(id=latest.id),
            iq=parsed.score,
            explanation=parsed.explanation,
            llm=ScoreLLMInfo(text=response.content, model=response.model),
        ).model_dump_json(exclude_none=True)

        await asyncio.gather(
            self._cache.store(post_key, body, ttl),
            self._cache.store(latest_key, body, ttl),
        )
        return Outcome.miss(body, ttl)

    async def _lookup_user(self, handle: str) -> EntityRecord:
        user = await self._call_upstream(
            UpstreamOperation.USER_LOOKUP, lambda: self._x.user_by_username(handle)
        )
        if user is None:
            raise NotFoundError("user not found")
        return user

    def _admit(self, raw_handle: Optional[str]) -> str:
        """
        Validate the handle and apply the production store guard.

        Args:
            raw_handle: Handle as supplied by the caller

        Returns:
            Normalized handle

        Raises:
            InvalidHandleError: If the handle is missing or invalid
            ServiceUnavailableError: If production runs without a store
        """
        handle = require_handle(raw_handle)
        if not self._cache.enabled and self._settings.is_production:
            raise ServiceUnavailableError(STORE_REQUIRED_MESSAGE)
        return handle

    async def _call_upstream(
        self, operation: UpstreamOperation, call: Callable[[], Awaitable[T]]
    ) -> T:
        """
        Call one upstream operation unless it is on cooldown.

        Args:
            operation: Upstream operation about to be called
            call: Upstream call

        Returns:
            Upstream result

        Raises:
            UpstreamRateLimitError: If on cooldown or the upstream rejects the call
        """
        await self._cooldowns.ensure_available(operation)

        try:
            return await call()
        except UpstreamRateLimitError as e:
            reset_epoch = int(e.reset_at.timestamp()) if e.reset_at else None
            retry_after = self._cooldowns.retry_after_for(reset_epoch)
            await self._cooldowns.trip(operation, retry_after)
            raise UpstreamRateLimitError(
                operation.value,
                retry_after=retry_after,
                reset_at=e.reset_at,
                from_upstream=True,
            ) from e

    async def _shielded(self, stage: Awaitable[Outcome]) -> Outcome:
        """
        Run the upstream stage so caller cancellation cannot abort it.

        Args:
            stage: Upstream, derivation and cache write stage

        Returns:
            Stage outcome
        """
        task = asyncio.ensure_future(stage)
        self._inflight.add(task)
        task.add_done_callback(self._on_stage_done)
        return await asyncio.shield(task)

    def _on_stage_done(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Pipeline stage ended with error", error=str(task.exception()))

    async def _run(self, name: str, pipeline: Callable[[], Awaitable[Outcome]]) -> Outcome:
        """
        Run a pipeline and convert every failure into an outcome.

        Args:
            name: Operation name for logs
            pipeline: Pipeline to run

        Returns:
            Outcome
        """
        try:
            outcome = await pipeline()
        except InvalidHandleError as e:
            return Outcome.failure(OutcomeStatus.BAD_INPUT, str(e))
        except ServiceUnavailableError as e:
            return Outcome.failure(OutcomeStatus.SERVICE_UNAVAILABLE, str(e))
        except LocalRateLimitError as e:
            return Outcome.failure(
                OutcomeStatus.RATE_LIMITED,
                LOCAL_LIMIT_MESSAGE,
                limiter=LimiterClass(e.limiter),
            )
        except UpstreamRateLimitError as e:
            return self._upstream_limited(e)
        except NotFoundError as e:
            return Outcome.failure(OutcomeStatus.NOT_FOUND, str(e))
        except DerivationError as e:
            return Outcome.failure(OutcomeStatus.DERIVATION_FAILED, str(e))
        except AppError as e:
            log_error(e, context=name)
            return Outcome.failure(OutcomeStatus.UNEXPECTED, str(e))
        except Exception as e:
            log_error(e, context=name)
            return Outcome.failure(OutcomeStatus.UNEXPECTED, "Unexpected error")

        logger.info(
            "Request served",
            operation=name,
            cache=("HIT" if outcome.cache_hit else "MISS"),
        )
        return outcome

    def _upstream_limited(self, error: UpstreamRateLimitError) -> Outcome:
        return Outcome.failure(
            OutcomeStatus.UPSTREAM_RATE_LIMITED,
            UPSTREAM_LIMIT_MESSAGE if error.from_upstream else COOLDOWN_MESSAGE,
            retry_after=error.retry_after or self._cooldowns.fallback_seconds,
            reset_at=error.reset_at,
            upstream_flag=error.from_upstream,
            upstream_operation=UpstreamOperation(error.operation),
        )
