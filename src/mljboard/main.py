"""FastAPI application entry point."""

import logging

import uvicorn
from fastapi import FastAPI

from mljboard import __version__
from mljboard.api.exception_handlers import register_exception_handlers
from mljboard.api.routers import api_router, health
from mljboard.config import Settings, get_settings
from mljboard.infrastructure.lifecycle import lifespan
from mljboard.infrastructure.observability import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Settings to run with (defaults to the environment)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Scrobble counts from Maloja servers and Last.fm",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


def run() -> None:
    """Run the API server with uvicorn (console script `mljboard`)."""
    settings = get_settings()
    uvicorn.run(
        "mljboard.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
