"""Health check response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Service health."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    active_runs: int
    timestamp: datetime
