"""Health check endpoint.

GET /health: process and database status. Always answers 200; database
connectivity is reported in the body.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from cris_api.core.config import Settings, get_settings
from cris_api.schemas.health import HealthResponse
from cris_api.services.health_service import get_health_snapshot

health_router = APIRouter(tags=["health"])


@health_router.get("/health", status_code=200, response_model=HealthResponse)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Return the current health snapshot (no authentication required)."""
    return await get_health_snapshot(settings)
