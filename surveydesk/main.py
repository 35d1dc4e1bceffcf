"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from surveydesk.core.config import settings
from surveydesk.core.exceptions import AppException
from surveydesk.db.mongodb import close_mongodb, connect_mongodb, ensure_indexes
from surveydesk.db.redis import close_redis, connect_redis
from surveydesk.domains.auth.router import router as auth_router
from surveydesk.domains.auth.state import AuthStateNotifier, log_auth_event
from surveydesk.domains.staff.router import router as staff_router
from surveydesk.domains.survey.router import router as survey_router
from surveydesk.middlewares.security import RateLimitMiddleware, SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting SurveyDesk in {settings.environment} mode...")

    await connect_mongodb()
    await ensure_indexes()
    await connect_redis()
    app.state.auth_notifier.subscribe(log_auth_event)

    yield

    # Shutdown
    logger.info("Shutting down SurveyDesk...")
    app.state.auth_notifier.clear()
    await close_mongodb()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="SurveyDesk",
        description="Customer satisfaction surveys and store dashboard for re-waxing service",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.auth_notifier = AuthStateNotifier()

    # Security middlewares (order matters: first added = last executed)
    app.add_middleware(SecurityHeadersMiddleware)

    # Rate limiting (only in production)
    if settings.is_production:
        app.add_middleware(RateLimitMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining"],
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.error_code,
                    "message": exc.message,
                    "details": exc.details,
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        if settings.is_development:
            return JSONResponse(
                status_code=500,
                content={
                    "error": {
                        "code": "INTERNAL_ERROR",
                        "message": str(exc),
                        "details": {"type": type(exc).__name__},
                    }
                },
            )
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                }
            },
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "environment": settings.environment}

    # API info endpoint
    @app.get("/")
    async def root():
        return {
            "name": "SurveyDesk API",
            "version": "0.1.0",
            "docs": "/docs" if settings.is_development else None,
        }

    # Register routers
    _register_routers(app)

    return app


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    api_prefix = settings.api_prefix

    app.include_router(auth_router, prefix=f"{api_prefix}/auth", tags=["Auth"])
    app.include_router(staff_router, prefix=f"{api_prefix}/staff", tags=["Staff"])
    app.include_router(survey_router, prefix=api_prefix, tags=["Surveys"])
