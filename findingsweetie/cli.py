"""Maintenance commands for the registry datastore.

Usage:
  findingsweetie migrate            # run the startup migrations now
  findingsweetie verify             # check tables, columns and indexes
  findingsweetie reactivate-pets    # mark every inactive report active
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field

from sqlalchemy import func, inspect, select

from findingsweetie.core.config import settings
from findingsweetie.db.base import Base
from findingsweetie.db.session import Database
from findingsweetie.models import Pet, User
from findingsweetie.services.pet_service import reactivate_all

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("users", "pets", "pet_images")


@dataclass
class VerifyReport:
    missing_tables: list[str] = field(default_factory=list)
    missing_columns: dict[str, list[str]] = field(default_factory=dict)
    missing_indexes: list[str] = field(default_factory=list)
    foreign_keys_enabled: bool = False
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.missing_tables and not self.missing_columns


def verify_schema(database: Database) -> VerifyReport:
    """Compare the live schema against the models."""
    report = VerifyReport()
    with database.engine.connect() as conn:
        inspector = inspect(conn)
        present = set(inspector.get_table_names())
        for name in REQUIRED_TABLES:
            if name not in present:
                report.missing_tables.append(name)
                continue
            table = Base.metadata.tables[name]
            columns = {c["name"] for c in inspector.get_columns(name)}
            missing = [c.name for c in table.columns if c.name not in columns]
            if missing:
                report.missing_columns[name] = missing
            indexes = {ix["name"] for ix in inspector.get_indexes(name)}
            report.missing_indexes.extend(ix.name for ix in table.indexes if ix.name not in indexes)

        if conn.dialect.name == "sqlite":
            report.foreign_keys_enabled = bool(conn.exec_driver_sql("PRAGMA foreign_keys").scalar())
        for model in (User, Pet):
            if model.__tablename__ in present:
                report.counts[model.__tablename__] = conn.execute(
                    select(func.count()).select_from(model.__table__)
                ).scalar_one()
    return report


def cmd_migrate(database: Database) -> int:
    applied = database.init_schema()
    print(f"Applied: {', '.join(applied)}" if applied else "Schema already current")
    return 0


def cmd_verify(database: Database) -> int:
    report = verify_schema(database)
    for name in report.missing_tables:
        print(f"Missing table: {name}")
    for name, columns in report.missing_columns.items():
        print(f"Missing columns in {name}: {', '.join(columns)}")
    for name in report.missing_indexes:
        print(f"Missing index: {name}")
    print(f"Foreign keys: {'enabled' if report.foreign_keys_enabled else 'DISABLED'}")
    for name, count in report.counts.items():
        print(f"{name}: {count} rows")
    print("Verification passed" if report.ok else "Verification FAILED")
    return 0 if report.ok else 1


def cmd_reactivate(database: Database) -> int:
    database.init_schema()
    with database.session() as db:
        changed = reactivate_all(db)
    print(f"Reactivated {changed} pets")
    return 0


COMMANDS = {
    "migrate": cmd_migrate,
    "verify": cmd_verify,
    "reactivate-pets": cmd_reactivate,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Finding Sweetie datastore maintenance")
    parser.add_argument("command", choices=sorted(COMMANDS), help="What to run")
    parser.add_argument("--database-url", default=settings.database_url, help="SQLAlchemy database URL")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    database = Database(args.database_url)
    try:
        return COMMANDS[args.command](database)
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
