"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from cris_api import __version__
from cris_api.core.config import get_settings
from cris_api.core.database import dispose_engine, init_engine
from cris_api.core.logging import setup_logging
from cris_api.core.security import configure_hashing


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine on startup, dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)
    configure_hashing(settings.bcrypt_rounds)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)
    logger.info(f"Starting CRIS API ({settings.environment})")

    yield

    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="CRIS API",
        description="Identity administration and health reporting for the CRIS trading system",
        version=__version__,
        lifespan=lifespan,
    )

    # Register exception handlers
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    from cris_api.api.router import create_router

    app.include_router(create_router())

    return app
