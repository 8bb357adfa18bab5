"""Root API router.

The health endpoint is mounted both at the root (for load balancers) and
under ``/api`` (for the front end).
"""

from fastapi import APIRouter


def create_router() -> APIRouter:
    """Create the root API router with all sub-routers included.

    Returns:
        Configured API router.
    """
    from cris_api.api.v1.health import health_router

    root_router = APIRouter()
    root_router.include_router(health_router)
    root_router.include_router(health_router, prefix="/api")

    return root_router
