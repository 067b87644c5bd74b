"""FastAPI application factory.

Creates and configures the FastAPI application with logging,
exception handlers, and route registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from huddle import __version__
from huddle.api.dependencies import get_settings, reset_dependencies
from huddle.api.exceptions import HuddleAPIError
from huddle.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from huddle.api.routes import register_routes
from huddle.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    reset_dependencies()
    logger.info("app_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    logging_config = settings.observability.logging
    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        redact_pii=logging_config.redact_pii,
    )

    app = FastAPI(
        title="Huddle API",
        description="Turn-based standup orchestration for team chat",
        version=__version__,
        lifespan=_lifespan,
    )

    for setting in settings.missing_provider_settings():
        logger.warning("provider_setting_missing", setting=setting)

    _register_exception_handlers(app)
    register_routes(app)

    logger.info("app_created", debug=settings.debug)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(HuddleAPIError)
    async def huddle_api_error_handler(request: Request, exc: HuddleAPIError) -> JSONResponse:
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        response = ErrorResponse(error=ErrorBody(code=exc.error_code, message=exc.message))
        return JSONResponse(status_code=exc.status_code, content=response.model_dump(mode="json"))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("validation_error", errors=len(exc.errors()), path=request.url.path)

        details = [
            ErrorDetail(field=".".join(str(loc) for loc in error["loc"]), message=error["msg"])
            for error in exc.errors()
        ]
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=details,
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        response = ErrorResponse(
            error=ErrorBody(code=ErrorCode.INTERNAL_ERROR, message="An unexpected error occurred")
        )
        return JSONResponse(status_code=500, content=response.model_dump(mode="json"))

    logger.debug("exception_handlers_registered")
