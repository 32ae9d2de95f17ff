"""
FastAPI Application - 100 Days Challenge & Blog API
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from hundred_days.config import Settings, settings
from hundred_days.database import DocumentStore
from hundred_days.errors import AppError, describe_validation_errors
from hundred_days.middleware.body_limit import BodySizeLimitMiddleware
from hundred_days.middleware.errors import ErrorEnvelopeMiddleware
from hundred_days.observability.logging import configure_logging
from hundred_days.routers.blog import router as blog_router
from hundred_days.routers.challenges import router as challenges_router
from hundred_days.routers.system import router as system_router
from hundred_days.schemas.envelope import error_body, error_response
from hundred_days.security import (
    OriginAllowListMiddleware,
    SecurityHeadersMiddleware,
    limiter,
)

configure_logging(settings.log_level)
logger = logging.getLogger("hundred_days")


# ==========================================
# Application Lifespan
# ==========================================
def build_store(config: Settings) -> DocumentStore:
    return DocumentStore.from_settings(config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application environment=%s", settings.environment)
    try:
        store = build_store(settings)
        await store.connect()
    except Exception:
        logger.exception("Document store unavailable; refusing to start")
        raise
    app.state.store = store
    logger.info("CORS enabled for: %s", ", ".join(settings.cors_origins))
    try:
        yield
    finally:
        store.close()
        logger.info("Shutting down application")


# ==========================================
# Exception handlers (define BEFORE registration)
# ==========================================
async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        error_body(describe_validation_errors(exc.errors())),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (
        status.HTTP_404_NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED,
    ):
        # Unknown path and unsupported method share one fallback
        return JSONResponse(
            error_body("Route not found"), status_code=status.HTTP_404_NOT_FOUND
        )
    return JSONResponse(
        error_body(str(exc.detail)),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        error_body("Too many requests, please try again later."),
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    message = "Server Error" if settings.is_production else str(exc) or "Server Error"
    return JSONResponse(
        error_body(message), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


# ==========================================
# FastAPI Application
# ==========================================
app = FastAPI(
    title="100 Days Challenge API",
    description="Blog posts and 100-day challenge tracking",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
)
# Order (outermost first): correlation id → security headers → origin guard
# → CORS → rate limit → error envelope → body size cap
app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
app.add_middleware(ErrorEnvelopeMiddleware, handler=unhandled_exception_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(OriginAllowListMiddleware, allowed_origins=settings.cors_origins)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")
app.state.limiter = limiter
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# ==========================================
# Routers
# ==========================================
app.include_router(system_router)
app.include_router(blog_router)
app.include_router(challenges_router)


def run() -> None:
    """Console entrypoint: serve the API with uvicorn."""
    if not settings.mongodb_uri:
        logger.error("MONGODB_URI is not defined in environment variables")
        raise SystemExit(1)
    logger.info("Server starting on port %s", settings.port)
    uvicorn.run(
        "hundred_days.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
