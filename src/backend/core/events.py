"""
Application lifecycle event handlers.

Manages startup and shutdown of logging and database connections.
"""

from typing import Callable

import structlog
from fastapi import FastAPI

from core.config import settings
from core.logging import configure_logging
from db.session import close_db, init_db

logger = structlog.get_logger(__name__)


def create_start_app_handler(app: FastAPI) -> Callable:
    """Create startup event handler."""

    async def start_app() -> None:
        configure_logging()
        logger.info("Starting Postboard API...", env=settings.APP_ENV)

        await init_db(create_tables=settings.DB_AUTO_CREATE)
        logger.info("Database initialized", auto_create=settings.DB_AUTO_CREATE)

        logger.info("Postboard API started successfully")

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    """Create shutdown event handler."""

    async def stop_app() -> None:
        logger.info("Shutting down Postboard API...")

        await close_db()

        logger.info("Postboard API shutdown complete")

    return stop_app
