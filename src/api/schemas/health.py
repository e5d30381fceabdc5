"""Health check response schema."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness report of the service."""

    status: Literal["healthy", "degraded"] = Field(
        ..., description="Overall status; degraded when a dependency is down"
    )
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    database: bool | None = Field(
        default=None,
        description="Database reachability, null when no database is configured",
    )
