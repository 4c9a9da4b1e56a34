"""
ShelfLink API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import Depends, FastAPI

from shelflink import __version__
from .schemas import HealthResponse
from .routes import matching, links
from .middleware import (
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
)
from .dependencies import (
    get_settings,
    get_service_container,
    init_services,
    ServiceContainer,
    Settings,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Initializes the service container and the database schema on startup.
    """
    settings = app.state.settings
    logger.info(f"Starting ShelfLink in {settings.environment} mode")

    services = init_services(settings)
    # Touch the repository so tables exist before the first request
    _ = services.link_repository
    app.state.services = services

    logger.info("ShelfLink started successfully")

    yield

    logger.info("Shutting down ShelfLink...")
    services.close()
    logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="ShelfLink",
        description="Fuzzy linking of reading lists and challenges to your library.",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Logging (outermost - captures everything)
    setup_logging(
        app,
        config=LoggingConfig.for_settings(settings),
        structured=settings.environment != "development",
    )

    setup_exception_handlers(app)

    api_prefix = "/api/v1"
    app.include_router(matching.router, prefix=api_prefix)
    app.include_router(links.router, prefix=api_prefix)

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "ShelfLink",
            "version": __version__,
            "status": "running",
            "docs": "/docs" if settings.debug else None,
        }

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    def health_check(
        services: ServiceContainer = Depends(get_service_container),
    ) -> HealthResponse:
        """Health check endpoint."""
        components = {"matcher": "healthy"}
        overall_healthy = True

        try:
            services.link_repository.count_broken_links("__health__")
            components["database"] = "healthy"
        except Exception as e:
            components["database"] = f"unhealthy: {e}"
            overall_healthy = False

        return HealthResponse(
            status="healthy" if overall_healthy else "degraded",
            version=__version__,
            components=components,
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "shelflink.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        workers=1 if settings.debug else 4,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
