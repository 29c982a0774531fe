"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
rate limiters, and OpenAPI metadata.
"""

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from buyer_api.core.config import Settings, get_settings
from buyer_api.core.database import create_all_tables, dispose_engine, init_engine
from buyer_api.core.errors import ImportRejectedError, PersistenceError, RateLimitExceeded, RecordValidationError
from buyer_api.core.logging import setup_logging
from buyer_api.lib.rate_limiter import (
    BUYER_CREATE,
    BUYER_UPDATE,
    RateLimitConfig,
    RateLimiters,
    RateLimitResult,
    build_rate_limiters,
    sweep_expired_buckets,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine and rate-limit sweep on startup, stop both on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_dir, json_output=settings.log_json)
    engine = init_engine(settings.database_url, echo=False)
    if engine.dialect.name == "sqlite":
        await create_all_tables()

    limiters: RateLimiters = app.state.rate_limiters
    sweep_task = asyncio.create_task(
        sweep_expired_buckets(limiters.store, settings.rate_limit_sweep_interval_seconds),
    )

    yield

    sweep_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweep_task

    await dispose_engine()


def build_app_rate_limiters(settings: Settings) -> RateLimiters:
    """Construct the create/update limiters from configured allowances."""
    return build_rate_limiters(
        create=RateLimitConfig(
            window_ms=settings.rate_limit_create_window_seconds * 1000,
            max_requests=settings.rate_limit_create_max,
            message=BUYER_CREATE.message,
        ),
        update=RateLimitConfig(
            window_ms=settings.rate_limit_update_window_seconds * 1000,
            max_requests=settings.rate_limit_update_max,
            message=BUYER_UPDATE.message,
        ),
    )


def rate_limit_response(exc: RateLimitExceeded, now_ms: int) -> JSONResponse:
    """Build the 429 response for a rejected check."""
    result = RateLimitResult(
        allowed=False,
        remaining=exc.remaining,
        reset_time_ms=exc.reset_time_ms,
        message=exc.message,
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "message": exc.message,
            "remaining": exc.remaining,
            "resetTime": result.reset_at.isoformat().replace("+00:00", "Z"),
        },
        headers={
            "X-RateLimit-Limit": str(exc.limit),
            "X-RateLimit-Remaining": str(exc.remaining),
            "X-RateLimit-Reset": str(exc.reset_time_ms),
            "Retry-After": str(result.retry_after_seconds(now_ms)),
        },
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build from. Loaded from the environment when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Buyer API",
        description="Buyer lead intake with CSV import/export and field-level history",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limiters = build_app_rate_limiters(settings)

    # Register exception handlers
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    @app.exception_handler(ImportRejectedError)
    async def import_rejected_handler(request: Request, exc: ImportRejectedError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
        )

    @app.exception_handler(RecordValidationError)
    async def record_validation_handler(request: Request, exc: RecordValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        content = {"detail": "Failed to import buyers"}
        if settings.is_development:
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        limiters: RateLimiters = request.app.state.rate_limiters
        return rate_limit_response(exc, limiters.create.now_ms())

    # Register middleware and routers
    from buyer_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
