"""
Application factory - creates and configures the FastAPI application.
This isolates all initialization logic from main.py.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from storefront import __version__
from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.api.all_routes import router as api_router
from storefront.api.routes.health import router as health_router
from storefront.config import Settings
from storefront.dependencies.services import ServiceContainer
from storefront.exceptions.handlers import setup_exception_handlers
from storefront.middleware.logging_setup import setup_logging
from storefront.middleware.setup import setup_middleware
from storefront.storage import StorageInterface
from storefront.tracing import instrument_fastapi, setup_tracing, shutdown_tracing
from storefront.uploads import PUBLIC_PREFIX, FileStore

http_adapter = HTTPFrameworkAdapter()

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, storage: Optional[StorageInterface] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Service settings; read from the environment when None
        storage: Pre-built storage backend; built from settings when None

    Returns:
        Configured FastAPI app instance ready to run.
    """
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the storage object: built at startup, closed at shutdown."""
        logger.info("Application starting up...")
        services = ServiceContainer(settings, storage=storage)
        app.state.services = services
        try:
            yield
        finally:
            logger.info("Application shutting down...")
            services.close()
            shutdown_tracing()
            logger.info("Shutdown complete")

    app = http_adapter.create_app(
        title="Storefront Service",
        description="Product catalog, cart and orders, prototyping projects and 3D-print requests",
        version=__version__,
        lifespan=lifespan
    )

    setup_middleware(app)
    setup_exception_handlers(app)

    if setup_tracing(settings):
        instrument_fastapi(app)

    app.include_router(health_router)
    app.include_router(api_router)

    # Uploaded files are served read-only under their generated names
    file_store = FileStore(settings.uploads_dir)
    app.mount(PUBLIC_PREFIX, http_adapter.static_files(str(file_store.uploads_dir)), name="uploads")

    logger.info(f"Application created with {settings.storage_backend} storage backend")
    return app
