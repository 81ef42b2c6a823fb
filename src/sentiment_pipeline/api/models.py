"""API-specific response models."""

from typing import Optional

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    """Service information returned by GET /."""

    service: str
    version: str
    docs: str = "/docs"
    health: str = "/api/health"
    endpoints: list[str] = Field(default_factory=list)
    metrics: Optional[str] = Field(default=None, description="Prometheus endpoint when enabled")
