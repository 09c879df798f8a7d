"""Health check endpoint for SnapVault."""

from fastapi import APIRouter

from snapvault.core.config import settings

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns service status, name, and version information without touching
    storage, so it stays fast during startup.
    """
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
    }
