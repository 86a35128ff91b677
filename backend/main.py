"""
Petroleum Operations API - Main Application Entry Point

Milestone and operation progress tracking backend for the project dashboard.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from petroleum_ops.core.config import get_settings
from petroleum_ops.core.error_handlers import register_exception_handlers
from petroleum_ops.core.logger import setup_logging

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger = setup_logging(settings.LOG_LEVEL)
    logger.info("Starting Petroleum Operations API in %s mode...", settings.ENVIRONMENT)

    # Initialize database if needed
    if settings.is_local:
        from petroleum_ops.infrastructure.local.database import init_db

        await init_db()

    yield

    # Shutdown
    logger.info("Shutting down Petroleum Operations API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Petroleum Operations API",
        description="Project milestones, milestone tasks and operation progress",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    register_exception_handlers(app)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from petroleum_ops.api import milestones, operation_progress, realtime

    app.include_router(milestones.router, prefix="/api/projects", tags=["milestones"])
    app.include_router(operation_progress.router, prefix="/api/projects", tags=["progress"])
    app.include_router(realtime.router, prefix="/api/realtime", tags=["realtime"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": APP_VERSION,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
