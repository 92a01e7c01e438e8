"""Database handle and session management."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

import findingsweetie.models  # noqa: F401 - register tables on Base.metadata
from findingsweetie.db.base import Base
from findingsweetie.db.migrations import run_migrations

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one datastore.

    Created when the application starts and disposed when it stops; nothing
    else holds a process-wide connection.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine: Engine = create_engine(url, echo=echo, connect_args=connect_args)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def init_schema(self) -> list[str]:
        """Migrate the pets table, then create any missing tables and indexes.

        Returns the migration transitions that were applied.
        """
        applied = run_migrations(self.engine)
        Base.metadata.create_all(bind=self.engine)
        return applied

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> bool:
        """True if the datastore answers a trivial query."""
        with self.engine.connect() as conn:
            return conn.exec_driver_sql("SELECT 1").scalar() == 1

    def dispose(self) -> None:
        logger.info("Closing database %s", self.url)
        self.engine.dispose()


def get_database(request: Request) -> Database:
    """Dependency returning the application's database handle."""
    return request.app.state.db


def get_db(request: Request) -> Iterator[Session]:
    """Dependency for FastAPI to get DB session."""
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
