"""Startup migration sequencer for the pets table.

Older datastores may hold a ``pets`` table without ``is_active`` or with a
status check that predates ``'Reunited'``; an earlier upgrade may also have
stopped after renaming the table away or before dropping its copy, leaving a
``pets_backup`` table behind. The new table is created and filled in a
single transaction, so a ``pets`` table that exists next to a backup is
always complete and the backup is the stale one. The sequencer is a
small state machine: inspect the schema, classify it into a
:class:`MigrationState`, apply the transition for that state, verify the
transition's postcondition and repeat until the schema is ``CURRENT``.

Running it against an up-to-date schema changes nothing.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import column, func, inspect, select, table, true
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.schema import CreateTable

from findingsweetie.core.errors import SchemaMigrationError
from findingsweetie.models.pet import Pet

logger = logging.getLogger(__name__)

PRIMARY_TABLE = Pet.__tablename__
BACKUP_TABLE = f"{PRIMARY_TABLE}_backup"
ACTIVE_COLUMN = "is_active"
NEWEST_STATUS = "Reunited"
MAX_STEPS = 6


class MigrationState(str, enum.Enum):
    FRESH = "fresh"            # neither table exists
    RECOVERY = "recovery"      # backup only: a migration died after the rename
    CLEANUP = "cleanup"        # both exist, backup is stale
    OUTDATED = "outdated"      # primary lacks is_active or the newest status
    CURRENT = "current"


@dataclass(frozen=True)
class SchemaSnapshot:
    has_primary: bool
    has_backup: bool
    has_active_column: bool = False
    admits_newest_status: bool = False

    @property
    def primary_is_current(self) -> bool:
        return self.has_primary and self.has_active_column and self.admits_newest_status


def inspect_schema(conn: Connection) -> SchemaSnapshot:
    """Collect the facts the state classifier needs."""
    inspector = inspect(conn)
    has_primary = inspector.has_table(PRIMARY_TABLE)
    has_backup = inspector.has_table(BACKUP_TABLE)
    if not has_primary:
        return SchemaSnapshot(has_primary=False, has_backup=has_backup)

    columns = {c["name"] for c in inspector.get_columns(PRIMARY_TABLE)}
    checks = inspector.get_check_constraints(PRIMARY_TABLE)
    return SchemaSnapshot(
        has_primary=True,
        has_backup=has_backup,
        has_active_column=ACTIVE_COLUMN in columns,
        admits_newest_status=any(NEWEST_STATUS in (ck.get("sqltext") or "") for ck in checks),
    )


def classify(snapshot: SchemaSnapshot) -> MigrationState:
    if not snapshot.has_primary:
        return MigrationState.RECOVERY if snapshot.has_backup else MigrationState.FRESH
    if snapshot.has_backup:
        return MigrationState.CLEANUP
    if not snapshot.primary_is_current:
        return MigrationState.OUTDATED
    return MigrationState.CURRENT


def detect_state(conn: Connection) -> MigrationState:
    return classify(inspect_schema(conn))


def _operations(conn: Connection) -> Operations:
    return Operations(MigrationContext.configure(conn))


@contextmanager
def foreign_keys_suspended(conn: Connection) -> Iterator[None]:
    """Turn off FK enforcement and reference rewriting while tables move.

    With ``legacy_alter_table`` on, renaming ``pets`` leaves the
    ``REFERENCES pets`` clauses of child tables untouched, so they point at
    the rebuilt table once it takes the old name back.
    """
    sqlite = conn.dialect.name == "sqlite"
    if sqlite:
        conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
        conn.exec_driver_sql("PRAGMA legacy_alter_table=ON")
        conn.commit()
    try:
        yield
    finally:
        if sqlite:
            conn.rollback()
            conn.exec_driver_sql("PRAGMA legacy_alter_table=OFF")
            conn.exec_driver_sql("PRAGMA foreign_keys=ON")
            conn.commit()


def _build_indexes(conn: Connection) -> None:
    for index in Pet.__table__.indexes:
        index.create(conn, checkfirst=True)


# ---- transitions ----


def create_fresh(conn: Connection) -> None:
    """Create the pets table in its current shape."""
    Pet.__table__.create(conn)
    conn.commit()


def recover_from_backup(conn: Connection) -> None:
    """Rename the backup back to the primary name."""
    _operations(conn).rename_table(BACKUP_TABLE, PRIMARY_TABLE)
    conn.commit()


def drop_stale_backup(conn: Connection) -> None:
    """Drop the leftover backup and make sure the primary has its indexes."""
    _operations(conn).drop_table(BACKUP_TABLE)
    _build_indexes(conn)
    conn.commit()


def _copy_rows(conn: Connection) -> int:
    source_columns = [c["name"] for c in inspect(conn).get_columns(BACKUP_TABLE)]
    target = Pet.__table__
    shared = [c.name for c in target.columns if c.name in source_columns and c.name != ACTIVE_COLUMN]

    backup = table(BACKUP_TABLE, *(column(name) for name in source_columns))
    selected = [backup.c[name] for name in shared]
    if ACTIVE_COLUMN in source_columns:
        selected.append(func.coalesce(backup.c[ACTIVE_COLUMN], true()))
    else:
        selected.append(true())

    result = conn.execute(target.insert().from_select([*shared, ACTIVE_COLUMN], select(*selected)))
    return result.rowcount


def _restore_after_failure(conn: Connection) -> None:
    try:
        conn.rollback()
        ops = _operations(conn)
        if inspect(conn).has_table(PRIMARY_TABLE):
            ops.drop_table(PRIMARY_TABLE)
        ops.rename_table(BACKUP_TABLE, PRIMARY_TABLE)
        conn.commit()
        logger.warning("Restored %s from %s after failed migration", PRIMARY_TABLE, BACKUP_TABLE)
    except Exception:
        logger.exception("Could not restore %s from %s", PRIMARY_TABLE, BACKUP_TABLE)


def _begin_with_ddl(conn: Connection) -> None:
    """Open a transaction that also covers DDL.

    pysqlite only starts transactions for DML, so CREATE TABLE would otherwise
    commit on its own and a crash could leave a half-filled table.
    """
    if conn.dialect.name == "sqlite":
        conn.exec_driver_sql("BEGIN")


def migrate_forward(conn: Connection) -> None:
    """Rebuild the pets table with is_active and the current status check."""
    ops = _operations(conn)
    ops.rename_table(PRIMARY_TABLE, BACKUP_TABLE)
    conn.commit()

    try:
        _begin_with_ddl(conn)
        conn.execute(CreateTable(Pet.__table__))
        copied = _copy_rows(conn)
        conn.commit()
    except Exception as exc:
        logger.error("Forward migration of %s failed: %s", PRIMARY_TABLE, exc)
        _restore_after_failure(conn)
        raise SchemaMigrationError(f"Forward migration of {PRIMARY_TABLE} failed") from exc

    logger.info("Copied %s rows into rebuilt %s", copied, PRIMARY_TABLE)
    ops.drop_table(BACKUP_TABLE)
    _build_indexes(conn)
    conn.commit()


@dataclass(frozen=True)
class Transition:
    apply: Callable[[Connection], None]
    postcondition: Callable[[SchemaSnapshot], bool]


TRANSITIONS: dict[MigrationState, Transition] = {
    MigrationState.FRESH: Transition(create_fresh, lambda s: s.primary_is_current),
    MigrationState.RECOVERY: Transition(recover_from_backup, lambda s: s.has_primary and not s.has_backup),
    MigrationState.CLEANUP: Transition(drop_stale_backup, lambda s: s.has_primary and not s.has_backup),
    MigrationState.OUTDATED: Transition(migrate_forward, lambda s: s.primary_is_current and not s.has_backup),
}


def apply_transition(conn: Connection, state: MigrationState) -> None:
    """Run one transition and check that it left the schema where it should."""
    transition = TRANSITIONS[state]
    logger.info("Applying pets schema transition: %s", state.value)
    transition.apply(conn)
    snapshot = inspect_schema(conn)
    if not transition.postcondition(snapshot):
        raise SchemaMigrationError(f"Transition {state.value} did not reach its postcondition: {snapshot}")


def run_migrations(engine: Engine) -> list[str]:
    """Bring the pets table to the current schema.

    Returns the transitions applied, in order; an empty list means the schema
    was already current.
    """
    applied: list[str] = []
    with engine.connect() as conn, foreign_keys_suspended(conn):
        for _ in range(MAX_STEPS):
            state = detect_state(conn)
            if state is MigrationState.CURRENT:
                if applied:
                    logger.info("Pets schema migrated: %s", " -> ".join(applied))
                else:
                    logger.debug("Pets schema already current")
                return applied
            apply_transition(conn, state)
            applied.append(state.value)
    raise SchemaMigrationError(f"Pets schema did not settle after {MAX_STEPS} steps: {applied}")
