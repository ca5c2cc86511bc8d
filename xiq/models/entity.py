"""
X account and post models.

Sandi Metz Principles:
- Small classes with clear purpose
- Validation at the upstream boundary
- Unknown upstream fields are relayed, never dropped
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PublicMetrics(BaseModel):
    """Public account counters."""

    model_config = ConfigDict(extra="allow")

    followers_count: int = Field(default=0, ge=0)
    following_count: int = Field(default=0, ge=0)
    tweet_count: int = Field(default=0, ge=0)
    listed_count: int = Field(default=0, ge=0)


class EntityRecord(BaseModel):
    """X account as returned by the upstream API."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Account id")
    username: str = Field(..., min_length=1, description="Handle")
    name: str = Field(..., description="Display name")
    verified: Optional[bool] = Field(None, description="Verification state")
    profile_image_url: Optional[str] = Field(None, description="Avatar URL")
    public_metrics: Optional[PublicMetrics] = Field(None, description="Counters")


class Post(BaseModel):
    """Single post from a timeline or search."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, description="Post id")
    text: str = Field(default="", description="Post text")
    created_at: Optional[str] = Field(None, description="Creation time (ISO 8601)")
    lang: Optional[str] = Field(None, description="Detected language")


class Timeline(BaseModel):
    """Page of posts for one account."""

    posts: List[Post] = Field(default_factory=list, description="Posts, newest first")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Paging metadata")
    includes: Dict[str, Any] = Field(default_factory=dict, description="Expansions")

    @property
    def latest(self) -> Optional[Post]:
        """Get the newest post if any."""
        return self.posts[0] if self.posts else None


class SearchResult(BaseModel):
    """Recent search page with expanded authors."""

    posts: List[Post] = Field(default_factory=list, description="Matched posts")
    authors: List[EntityRecord] = Field(default_factory=list, description="Authors")

    @property
    def first_author(self) -> Optional[EntityRecord]:
        """Get the first expanded author if any."""
        return self.authors[0] if self.authors else None


class ProfileBody(BaseModel):
    """Cached body of the profile operation."""

    user: EntityRecord


class PostsBody(BaseModel):
    """Cached body of the posts operation."""

    user: EntityRecord
    tweets: List[Post] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict)
    includes: Dict[str, Any] = Field(default_factory=dict)
