"""Application lifecycle management for startup and shutdown tasks."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mljboard.application.services import CancellationRegistry
from mljboard.config import Settings, get_settings
from mljboard.infrastructure.observability import configure_logging
from mljboard.infrastructure.persistence import Database

logger = logging.getLogger(__name__)


# Hey future me, everything before `yield` runs at STARTUP and everything after at
# SHUTDOWN. The try/finally makes sure the engine is disposed even if startup dies
# halfway. Settings come from app.state (create_app put them there) so tests can run
# the real lifespan against a throwaway sqlite file.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown tasks including:
    - Logging configuration
    - Database initialization (tables created if missing)
    - Cancellation registry for long-running Last.fm fetches
    - Resource cleanup
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    db: Database | None = None
    try:
        db = Database(settings.database)
        await db.create_tables()
        app.state.db = db
        logger.info("Database initialized: %s", settings.database.url)

        app.state.cancellation_registry = CancellationRegistry()

        if not settings.lastfm.is_configured():
            logger.warning("No Last.fm API key configured - Last.fm features disabled")

        yield
    finally:
        logger.info("Shutting down application")
        registry = getattr(app.state, "cancellation_registry", None)
        if registry is not None:
            # Wake any fetch still waiting so its request can finish
            for fetch_id in registry.active_ids():
                registry.cancel(fetch_id)
        if db is not None:
            await db.close()
            logger.info("Database connection closed")
