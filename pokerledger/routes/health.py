"""Health check endpoint."""

from fastapi import APIRouter

from pokerledger.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """
    Health check endpoint.

    The service holds no connections of its own, so it reports healthy
    whenever it can answer.

    Returns:
        dict: Health status and version.
    """
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
    }
