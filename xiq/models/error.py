"""
Error response models.

Sandi Metz Principles:
- Single Responsibility: Error body shape
- Clear naming: Fields named as clients read them
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body returned for every failed operation."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Error message describing what went wrong")
    reset_at: Optional[str] = Field(
        None, alias="resetAt", description="Upstream reset time (ISO 8601, UTC)"
    )

    @classmethod
    def upstream_limited(
        cls, message: str, reset_at: Optional[datetime]
    ) -> "ErrorResponse":
        """Create upstream rate limit error with its reset time."""
        reset = reset_at.isoformat().replace("+00:00", "Z") if reset_at else None
        return cls(error=message, reset_at=reset)

    def to_json(self) -> str:
        """Render the client-facing body."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
