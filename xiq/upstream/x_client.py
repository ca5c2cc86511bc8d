"""
X API v2 client.

Sandi Metz Principles:
- Single Responsibility: X API interaction
- Small methods: Each method < 10 lines
- Dependency Injection: Token and transport injected
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from xiq.exceptions import ConfigurationError, UpstreamError, UpstreamRateLimitError
from xiq.models.entity import EntityRecord, Post, SearchResult, Timeline
from xiq.models.keys import UpstreamOperation
from xiq.upstream.provider import BaseXClient
from xiq.utils.logger import get_logger, log_upstream_call

logger = get_logger(__name__)

USER_FIELDS = "id,name,username,verified,profile_image_url,public_metrics"
TWEET_FIELDS = "id,text,created_at,public_metrics,lang,possibly_sensitive,referenced_tweets"
MEDIA_FIELDS = "media_key,type,url,preview_image_url"


class XClient(BaseXClient):
    """
    Read-only X API v2 client using an app-only bearer token.

    The underlying httpx client is created lazily and reused.
    """

    def __init__(
        self,
        bearer_token: str,
        base_url: str = "https://api.x.com/2",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize X client.

        Args:
            bearer_token: App-only bearer token
            base_url: X API v2 base URL
            timeout: Request timeout in seconds
            transport: Optional transport (tests inject a mock transport)
        """
        self._bearer_token = bearer_token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def user_by_username(self, username: str) -> Optional[EntityRecord]:
        payload = await self._get(
            UpstreamOperation.USER_LOOKUP,
            f"/users/by/username/{username}",
            {"user.fields": USER_FIELDS},
        )
        return self._parse_user(payload.get("data"))

    async def search_recent(self, query: str, max_results: int = 10) -> SearchResult:
        payload = await self._get(
            UpstreamOperation.CONTENT_SEARCH,
            "/tweets/search/recent",
            {
                "query": query,
                "max_results": max_results,
                "expansions": "author_id",
                "user.fields": USER_FIELDS,
            },
        )
        users = payload.get("includes", {}).get("users", [])
        authors = [user for user in map(self._parse_user, users) if user]
        return SearchResult(posts=self._parse_posts(payload.get("data")), authors=authors)

    async def user_timeline(
        self,
        user_id: str,
        max_results: int,
        exclude: Sequence[str] = ("replies",),
        with_media: bool = False,
    ) -> Timeline:
        params: Dict[str, Any] = {
            "max_results": max_results,
            "exclude": ",".join(exclude),
            "tweet.fields": TWEET_FIELDS,
            "expansions": "referenced_tweets.id",
        }
        if with_media:
            params["expansions"] = "attachments.media_keys,referenced_tweets.id"
            params["media.fields"] = MEDIA_FIELDS

        payload = await self._get(
            UpstreamOperation.CONTENT_TIMELINE, f"/users/{user_id}/tweets", params
        )
        return Timeline(
            posts=self._parse_posts(payload.get("data")),
            meta=payload.get("meta", {}),
            includes=payload.get("includes", {}),
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get(
        self, operation: UpstreamOperation, path: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Issue one GET and translate failures.

        Args:
            operation: Upstream operation being called
            path: Path below the base URL
            params: Query parameters

        Returns:
            Decoded JSON payload

        Raises:
            UpstreamRateLimitError: On HTTP 429
            UpstreamError: On transport errors and other non-success statuses
        """
        log_upstream_call(operation.value, path=path)
        try:
            response = await self._get_client().get(path, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(operation.value, f"X API request failed: {e}") from e

        if response.status_code == 429:
            raise UpstreamRateLimitError(
                operation.value, reset_at=self._parse_reset(response)
            )
        if response.status_code == 404:
            return {}
        if response.is_error:
            raise UpstreamError(
                operation.value,
                f"X API {operation.value} failed with status {response.status_code}",
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(operation.value, "X API returned invalid JSON") from e

    def _parse_reset(self, response: httpx.Response) -> Optional[datetime]:
        reset = response.headers.get("x-rate-limit-reset")
        if not reset:
            return None
        try:
            return datetime.fromtimestamp(int(reset), tz=timezone.utc)
        except ValueError:
            logger.warning("Malformed rate limit reset header", value=reset)
            return None

    def _parse_user(self, data: Optional[Dict[str, Any]]) -> Optional[EntityRecord]:
        if not data:
            return None
        try:
            return EntityRecord.model_validate(data)
        except ValidationError as e:
            logger.warning("Discarding malformed user", error=str(e))
            return None

    def _parse_posts(self, data: Optional[List[Dict[str, Any]]]) -> List[Post]:
        posts = []
        for item in data or []:
            try:
                posts.append(Post.model_validate(item))
            except ValidationError as e:
                logger.warning("Discarding malformed post", error=str(e))
        return posts

    def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create httpx client.

        Returns:
            Async HTTP client

        Raises:
            ConfigurationError: If no bearer token is configured
        """
        if not self._bearer_token:
            raise ConfigurationError(
                "Missing X API bearer token. Set X_BEARER_TOKEN in your environment."
            )
        if not self._client:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Authorization": f"Bearer {self._bearer_token}"},
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client
