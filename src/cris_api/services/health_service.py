"""Process and database health snapshot."""

import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from cris_api.core import database
from cris_api.core.config import Settings
from cris_api.schemas.health import DatabaseStatus, HealthResponse

_PROCESS_STARTED = time.monotonic()

ConnectivityCheck = Callable[[float], Awaitable[bool]]


def process_uptime() -> float:
    """Seconds elapsed since this module was first imported."""
    return time.monotonic() - _PROCESS_STARTED


async def get_health_snapshot(
    settings: Settings,
    check: ConnectivityCheck | None = None,
) -> HealthResponse:
    """Build a health snapshot.

    Connectivity is reported as data: the check is expected to return False
    rather than raise, and to give up after ``settings.health_check_timeout``.

    Args:
        settings: Application settings (environment label, check timeout).
        check: Async callable taking a timeout and returning connectivity.
            Defaults to :func:`cris_api.core.database.check_connectivity`.

    Returns:
        The current health snapshot.
    """
    check = check or database.check_connectivity
    connected = await check(settings.health_check_timeout)
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(UTC),
        uptime=round(process_uptime(), 3),
        environment=settings.environment,
        database=DatabaseStatus.CONNECTED if connected else DatabaseStatus.DISCONNECTED,
    )
