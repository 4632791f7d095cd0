"""
FastAPI Main Application
Entry point for the HomeHub listings API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from .config import get_settings
from .errors import setup_error_handlers
from .middleware import RequestLoggingMiddleware, RequestTimingMiddleware
from .routers import (
    admin_router,
    agents_router,
    auth_router,
    drafts_router,
    health_router,
    owner_approvals_router,
    properties_router,
    public_router,
    users_router,
)

logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and shutdown."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.version} ({settings.environment})")
    if settings.is_production and settings.jwt_secret_key == "change-me-in-production":
        logger.warning("JWT_SECRET_KEY is still the default value")
    if not settings.smtp_host:
        logger.info("SMTP_HOST not set, notification emails will be skipped")

    yield

    logger.info(f"Shutting down {settings.app_name}...")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=settings.description,
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    setup_error_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)
    # Drafts before properties so /properties/drafts is not matched as /properties/{id}
    app.include_router(drafts_router)
    app.include_router(properties_router)
    app.include_router(public_router)
    app.include_router(admin_router)
    app.include_router(agents_router)
    app.include_router(owner_approvals_router)

    @app.get("/")
    async def root():
        """API information."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "description": settings.description,
            "endpoints": {
                "health": "/health",
                "status": "/status",
                "metrics": "/metrics",
                "docs": "/docs",
                "properties": "/api/v1/properties",
                "public": "/api/v1/public/properties",
                "admin": "/api/v1/admin",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "homehub.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )
