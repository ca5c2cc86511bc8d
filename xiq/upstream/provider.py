"""
Upstream X API client interface.

Sandi Metz Principles:
- Single Responsibility: Upstream abstraction
- Interface Segregation: Only the three calls the orchestrator makes
- Dependency Inversion: Depend on abstraction, not concrete classes
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from xiq.models.entity import EntityRecord, SearchResult, Timeline


class BaseXClient(ABC):
    """
    Abstract base class for X API clients.

    Implementations raise UpstreamRateLimitError when the upstream
    signals overload and UpstreamError for any other failure.
    """

    @abstractmethod
    async def user_by_username(self, username: str) -> Optional[EntityRecord]:
        """
        Look up an account by handle.

        Args:
            username: Normalized handle

        Returns:
            Account, None if the upstream has no such account
        """
        pass

    @abstractmethod
    async def search_recent(self, query: str, max_results: int = 10) -> SearchResult:
        """
        Search recent posts with author expansion.

        Args:
            query: X search query
            max_results: Page size (10-100)

        Returns:
            Matched posts and their authors
        """
        pass

    @abstractmethod
    async def user_timeline(
        self,
        user_id: str,
        max_results: int,
        exclude: Sequence[str] = ("replies",),
        with_media: bool = False,
    ) -> Timeline:
        """
        Fetch recent posts of an account.

        Args:
            user_id: Account id
            max_results: Page size (5-100)
            exclude: Post kinds to exclude ("replies", "retweets")
            with_media: Expand media attachments

        Returns:
            Timeline page
        """
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None
