"""
Health check models.

Sandi Metz Principles:
- Small classes with clear purpose
- Clear naming conventions
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

ComponentStatus = Literal["healthy", "unhealthy", "degraded"]


class HealthResponse(BaseModel):
    """Liveness response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Service status")
    environment: str = Field(..., description="Deployment environment")
    version: str = Field(..., description="Application version")


class ComponentHealth(BaseModel):
    """Readiness of one dependency."""

    status: ComponentStatus = Field(..., description="Component status")
    backend: Optional[str] = Field(None, description="Implementation in use")
    latency_ms: Optional[float] = Field(None, description="Probe latency in ms")
    message: Optional[str] = Field(None, description="Why the component is not healthy")


class DetailedHealthResponse(HealthResponse):
    """Readiness response with per-dependency detail."""

    status: ComponentStatus = Field(..., description="Worst component status")
    components: Dict[str, ComponentHealth] = Field(
        default_factory=dict, description="Store, X API and model readiness"
    )

    @staticmethod
    def overall(components: Dict[str, ComponentHealth]) -> ComponentStatus:
        """Reduce component statuses to the worst one."""
        statuses = {c.status for c in components.values()}
        if "unhealthy" in statuses:
            return "unhealthy"
        if "degraded" in statuses:
            return "degraded"
        return "healthy"
