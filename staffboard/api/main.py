"""
staffboard.api.main - FastAPI Application Factory

Creates and configures the FastAPI application for the staffboard API.
Every endpoint answers with the ActionResult envelope:

    {"success": true, "data": ...}
    {"success": false, "error": {"code": "...", "message": "..."}}

Usage:
    # Development
    uvicorn staffboard.api.main:app --reload

    # Production
    uvicorn staffboard.api.main:app --host 0.0.0.0 --port 8000
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from staffboard.actions.errors import map_validation_issues
from staffboard.actions.result import ErrorCode, failure, failure_from
from staffboard.api.deps import to_response
from staffboard.api.ratelimit import RateLimiter, RateLimitExceeded
from staffboard.api.v1.router import api_router
from staffboard.auth.client import AuthClient
from staffboard.models.database import get_engine, get_sessionmaker
from staffboard.settings import StaffboardSettings, get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Sets up the database connection pool and the auth client on startup,
    closes both on shutdown.
    """
    settings: StaffboardSettings = app.state.settings
    logger.info("Starting staffboard API server...")

    engine = get_engine(settings.database_url, settings.database_echo)
    app.state.engine = engine
    app.state.sessionmaker = get_sessionmaker(engine)
    app.state.auth_client = AuthClient.from_settings(settings)

    logger.info("Database connection pool and auth client initialized")

    yield

    logger.info("Shutting down staffboard API server...")
    await app.state.auth_client.aclose()
    await engine.dispose()
    logger.info("Database connections closed")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI's own validation errors as a VALIDATION_ERROR envelope."""
    error = map_validation_issues(list(exc.errors()), skip_prefix=1)
    return to_response(failure_from(error))


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return to_response(
        failure(ErrorCode.RATE_LIMITED, exc.detail, details={"retry_after": exc.retry_after}),
        headers=exc.headers,
    )


def create_app(settings: StaffboardSettings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to get_settings())

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = FastAPI(
        title="staffboard API",
        description="API for the staffing agency dashboard",
        version="0.1.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.sign_in_limiter = RateLimiter(
        max_requests=settings.sign_in_max_requests,
        window_seconds=settings.sign_in_window_seconds,
    )
    app.state.password_reset_limiter = RateLimiter(
        max_requests=settings.password_reset_max_requests,
        window_seconds=settings.password_reset_window_seconds,
    )

    logger.info(f"Configuring CORS for origins: {settings.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Create the application instance
app = create_app()

__all__ = ["app", "create_app", "lifespan"]
