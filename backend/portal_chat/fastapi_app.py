"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- /messages (send, contacts, thread, mark-seen, unread-summary)
- /ws (realtime user channel)
- /metrics, /health
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka

from portal_chat.config.logging_config import setup_logging, correlation_id_var
from portal_chat.config.settings import Config
from portal_chat.infrastructure.realtime import ConnectionHub
from portal_chat.observability.metrics import record_request_latency
from portal_chat.setup.ioc.container import RedisHandle, create_container
from portal_chat.presentation.api import (
    messages_router,
    metrics_router,
    realtime_router,
)

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", "NO Correlation ID")

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class RequestLatencyMiddleware(BaseHTTPMiddleware):
    """Records request latency by route template."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        route = request.scope.get("route")
        record_request_latency(
            method=request.method,
            route=getattr(route, "path", request.url.path),
            status_code=response.status_code,
            seconds=time.perf_counter() - started,
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    - Startup: start the Redis relay when channels are bridged across processes
    - Shutdown: stop the relay, close DI container (disconnects Prisma / Redis)
    """
    container: AsyncContainer = app.state.dishka_container
    relay = None

    redis = await container.get(RedisHandle)
    if redis.redis is not None:
        from portal_chat.infrastructure.realtime.redis_publisher import (
            RedisChannelRelay,
        )

        relay = RedisChannelRelay(redis.redis, await container.get(ConnectionHub))
        relay.start()

    logger.info("FastAPI application started. DI container initialized.")
    try:
        yield
    finally:
        try:
            if relay is not None:
                await relay.stop()
        finally:
            await container.close()
            logger.info("FastAPI application shutdown. DI container closed.")


def create_fastapi_app(container: Optional[AsyncContainer] = None) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: DI container to use; a fresh one is built from Config if omitted

    Returns:
        FastAPI application instance
    """
    setup_logging(Config.LOG_LEVEL, Config.LOG_PATH or None)

    app = FastAPI(
        title="Portal Chat API",
        description="Role-gated realtime messaging for the employee portal",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container or create_container(), app)

    app.add_middleware(RequestLatencyMiddleware)
    # Correlation ID middleware (must be added before CORS)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Validation error handler - missing / malformed fields are a 400
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info(f"[VALIDATION ERROR] {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "details": jsonable_errors(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.info(f"[HTTP ERROR {exc.status_code}] {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # Global exception handler - details stay in the log
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"[GLOBAL ERROR] {type(exc).__name__} on {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    # Health check routes
    @app.get("/", tags=["health"])
    async def root():
        return {"message": "Portal chat server is running."}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    # Register routers
    app.include_router(messages_router)
    app.include_router(realtime_router)  # WS /ws
    app.include_router(metrics_router)  # GET /metrics

    return app


def jsonable_errors(errors) -> list[dict]:
    """Drop non-serializable context (e.g. exception objects) from pydantic errors."""
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in errors
    ]


# Create the app instance
app = create_fastapi_app()
