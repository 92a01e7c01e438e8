"""Finding Sweetie FastAPI application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from findingsweetie.api import auth, health, pets, push, users
from findingsweetie.core.config import Settings, settings as default_settings
from findingsweetie.db.session import Database

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    The database is opened and migrated in the lifespan, before any request is
    served; a migration failure propagates and aborts startup.
    """
    settings = settings or default_settings

    logging.basicConfig(
        level=settings.effective_log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        database = Database(settings.database_url, echo=settings.sql_echo)
        applied = database.init_schema()
        if applied:
            logger.info("Schema migrations applied: %s", ", ".join(applied))
        app.state.db = database
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    for module in (health, auth, users, pets, push):
        app.include_router(module.router, prefix=settings.api_prefix)

    return app


app = create_app()
