"""Health check and metrics endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from huddle import __version__
from huddle.api.dependencies import RegistryDep
from huddle.api.models.health import HealthResponse
from huddle.observability.logging import get_logger
from huddle.standup.models import RunPhase

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(registry: RegistryDep) -> HealthResponse:
    """Check service health status."""
    active = sum(1 for run in registry.runs() if run.phase is RunPhase.IN_PROGRESS)
    logger.debug("health_check_request", active_runs=active)
    return HealthResponse(
        status="healthy",
        version=__version__,
        active_runs=active,
        timestamp=datetime.now(UTC),
    )


@router.get("/metrics")
async def get_metrics() -> Response:
    """Get Prometheus metrics in text format for scraping."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
