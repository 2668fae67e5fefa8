"""Health Check Routes.

Health check endpoint for container healthchecks and monitoring.

Author: Barangay Platform Team
Version: 1.0.0
"""

from fastapi import APIRouter

from barangay_api import __version__

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        dict: Service status information.
    """
    return {
        "status": "ok",
        "service": "barangay_api",
        "version": __version__,
    }
