"""Main FastAPI application for the Hotel Ops API."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .db.connection import close_executor, open_executor
from .db.errors import DataAccessError, RemoteProcedureMissingError
from .errors import register_exception_handlers
from .errors.problem_details import ServiceUnavailableError
from .auth.middleware import AuthenticationMiddleware
from .routes import routers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Hotel Ops API"
SERVICE_VERSION = "1.0.0"

PUBLIC_PATHS = ["/health", "/ready", "/live", "/", "/docs", "/redoc", "/openapi.json"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {SERVICE_NAME}")
    settings = get_settings()

    # Configure logging level from settings
    logging.getLogger().setLevel(getattr(logging, settings.log_level))

    try:
        executor = await open_executor(app, settings)
        await executor.check_ready()
        logger.info(f"Database connectivity verified ({executor.mode} mode)")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        await close_executor(app)
        raise

    yield

    # Shutdown
    logger.info(f"Shutting down {SERVICE_NAME}")
    try:
        await close_executor(app)
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Hotel operations backend: reviews, messaging, campaigns, social posts and AI agents",
        version=SERVICE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(AuthenticationMiddleware, skip_paths=PUBLIC_PATHS)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    for router in routers:
        app.include_router(router)

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint with database connectivity test."""
        executor = app.state.executor
        try:
            await executor.check_ready()
        except DataAccessError as e:
            logger.error(f"Health check failed: {e}")
            raise ServiceUnavailableError("Database connection failed")

        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "database": "connected",
            "database_mode": executor.mode
        }

    @app.get("/ready", tags=["Health"])
    async def ready_check() -> Dict[str, Any]:
        """Readiness check endpoint.

        A missing remote SQL procedure is reported with the steps to fix it.
        """
        executor = app.state.executor
        try:
            await executor.check_ready()
        except RemoteProcedureMissingError as e:
            logger.error(f"Readiness check failed: {e}")
            raise ServiceUnavailableError(str(e), database_error=e.code)
        except DataAccessError as e:
            logger.error(f"Readiness check failed: {e}")
            raise ServiceUnavailableError("Service not ready")

        return {
            "status": "ready",
            "service": SERVICE_NAME,
            "database_mode": executor.mode
        }

    @app.get("/live", tags=["Health"])
    async def liveness_check() -> Dict[str, str]:
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": SERVICE_NAME
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        """Root endpoint with API information."""
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()

    uvicorn.run(
        "hotelops.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
