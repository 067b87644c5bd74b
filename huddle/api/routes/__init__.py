"""API route registration."""

from fastapi import FastAPI

from huddle.api.routes.events import router as events_router
from huddle.api.routes.health import router as health_router
from huddle.api.routes.runs import router as runs_router
from huddle.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(runs_router, tags=["Runs"])
    app.include_router(events_router, tags=["Events"])
    app.include_router(health_router, tags=["Health"])

    logger.info("routes_registered")
