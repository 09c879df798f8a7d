"""Main application entrypoint for SnapVault."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from snapvault.api.v1 import routes_health
from snapvault.api.v1.routes_images import router as images_router
from snapvault.api.v1.routes_upload import router as upload_router
from snapvault.core.config import settings
from snapvault.core.logging import setup_logging
from snapvault.middleware import HTTPErrorLoggingMiddleware
from snapvault.storage.factory import create_storage_backend
from snapvault.storage.upload_store import UploadStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the storage client at startup and release it at shutdown."""
    backend = create_storage_backend(settings)
    app.state.storage_backend = backend
    app.state.upload_store = UploadStore()
    logger.info(
        "Storage backend ready",
        extra={"backend": backend.get_backend_name(), "bucket": settings.GCS_BUCKET_NAME},
    )
    try:
        yield
    finally:
        backend.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    # Initialize logging first
    setup_logging()

    app = FastAPI(
        title=settings.SERVICE_NAME,
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(HTTPErrorLoggingMiddleware)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(upload_router)
    app.include_router(images_router)

    return app


# Export app instance for ASGI servers
app = create_app()
