"""
FastAPI application entry point.

This is the main entry point for the Prompt Gallery API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import setup_exception_handlers
from api.routers import (
    backup_router,
    collections_router,
    generate_router,
    health_router,
    prompts_router,
    stats_router,
    tags_router,
    templates_router,
    tools_router,
    uploads_router,
)
from core.config import get_settings
from database import close_database, init_database

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format=settings.log_format,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()

    # ============ Startup ============
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    if settings.is_database_configured:
        try:
            await init_database()
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            # Don't raise - gallery endpoints answer 503 until the database is back
    else:
        logger.info("Database not configured, gallery endpoints disabled")

    if not settings.is_gemini_configured:
        logger.info("GEMINI_API_KEY not set, clients must send X-API-Key")

    logger.info("Application startup complete")

    yield

    # ============ Shutdown ============
    logger.info("Shutting down application...")

    await close_database()

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="AI image gallery with scene-aware prompt composition",
        version=settings.app_version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    # ============ Middleware ============

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # ============ Exception Handlers ============
    setup_exception_handlers(app)

    # ============ Routers ============

    # Health check
    app.include_router(health_router, prefix="/api")

    # Prompt composition and image generation
    app.include_router(generate_router, prefix="/api")

    # Gallery entries
    app.include_router(prompts_router, prefix="/api")

    # Tags and auto-tagging
    app.include_router(tags_router, prefix="/api")

    # Collections
    app.include_router(collections_router, prefix="/api")

    # Style templates
    app.include_router(templates_router, prefix="/api")

    # Enhance / translate
    app.include_router(tools_router, prefix="/api")

    # Daily usage
    app.include_router(stats_router, prefix="/api")

    # Backup export / import
    app.include_router(backup_router, prefix="/api")

    # Stored image files, under the API and at the public URL prefix
    app.include_router(uploads_router, prefix="/api")
    app.include_router(uploads_router)

    # ============ Root Endpoint ============

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs" if not settings.is_production else None,
            "health": "/api/health",
        }

    return app


# Create application instance
app = create_app()


def run():
    """Run the application with uvicorn (for development)."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
