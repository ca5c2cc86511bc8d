"""
Derived score models.

Sandi Metz Principles:
- Small classes focused on the generative step
- Clear separation of parsed score and cached body
"""

from typing import Optional

from pydantic import BaseModel, Field

SCORE_MIN = 55
SCORE_MAX = 145


class ParsedScore(BaseModel):
    """Score recovered from raw model output."""

    score: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX, description="Clamped score")
    explanation: Optional[str] = Field(None, description="Model justification")
    from_fallback: bool = Field(
        default=False, description="Recovered by numeric extraction"
    )


class ScoreUser(BaseModel):
    """Account reference in a score body."""

    id: str
    username: str


class ScorePost(BaseModel):
    """Post reference in a score body."""

    id: str


class ScoreLLMInfo(BaseModel):
    """Raw model output kept for transparency."""

    text: str
    model: str


class ScoreResult(BaseModel):
    """Cached body of the score operation."""

    user: ScoreUser
    tweet: ScorePost
    iq: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    explanation: Optional[str] = None
    llm: ScoreLLMInfo
