"""
Schema manager.

Tables are created from the ORM metadata when absent. Columns that were added
after the first release are brought in by numbered migrations, applied in
order and recorded in the ``schema_version`` table.

A store that has tables but no ``schema_version`` row predates versioning:
every migration is replayed against it and each column addition checks the
live column list first. Nothing here ever drops or rewrites data.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import sqlalchemy as sa
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy.engine import Connection
from sqlalchemy.exc import OperationalError

import gardenplanner.models  # noqa: F401  (populates Base.metadata)
from gardenplanner.db.base import Base
from gardenplanner.db.session import Database
from gardenplanner.models.settings import SchemaVersion

logger = logging.getLogger(__name__)

_DATA_TABLES = ("tasks", "crops", "settings")


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    table: str
    # Factories, because a Column object can only be attached to one Table
    columns: tuple[Callable[[], sa.Column], ...]


MIGRATIONS: list[Migration] = [
    Migration(1, "task photos", "tasks", (
        lambda: sa.Column("photos", sa.JSON(none_as_null=True), nullable=True),
    )),
    Migration(2, "task type", "tasks", (
        lambda: sa.Column("type", sa.String(10), nullable=False, server_default="task"),
    )),
    Migration(3, "task templates and categories", "tasks", (
        lambda: sa.Column("is_template", sa.Boolean(), nullable=False, server_default="0"),
        lambda: sa.Column("category", sa.String(20), nullable=True),
    )),
    Migration(4, "archived notes", "tasks", (
        lambda: sa.Column("archived", sa.Boolean(), nullable=False, server_default="0"),
    )),
    Migration(5, "save photos to library", "settings", (
        lambda: sa.Column("save_to_photo_library", sa.Boolean(), nullable=False, server_default="0"),
    )),
]

LATEST_VERSION = MIGRATIONS[-1].version


async def ensure_schema(database: Database) -> int:
    """Create missing tables and apply pending migrations. Returns the schema version.

    Safe to call on every startup.
    """
    try:
        async with database.engine.begin() as conn:
            version = await conn.run_sync(_ensure_schema_sync)
    except Exception:
        logger.exception("ensure_schema: failed")
        raise
    logger.info("ensure_schema: store at version %d", version)
    return version


async def current_version(database: Database) -> Optional[int]:
    """Stored schema version, or None for an unversioned store."""
    async with database.engine.connect() as conn:
        return await conn.run_sync(_read_version)


# ── Sync internals (run through AsyncConnection.run_sync) ─────────────────────


def _ensure_schema_sync(conn: Connection) -> int:
    existing = set(sa.inspect(conn).get_table_names())
    had_data_tables = any(t in existing for t in _DATA_TABLES)

    Base.metadata.create_all(conn)

    version = _read_version(conn)
    if version is None:
        if had_data_tables:
            logger.info("ensure_schema: unversioned store found, probing columns")
            version = 0
        else:
            # Fresh store: create_all already built the latest shape
            _write_version(conn, LATEST_VERSION)
            return LATEST_VERSION

    ops = Operations(MigrationContext.configure(conn))
    for migration in MIGRATIONS:
        if migration.version <= version:
            continue
        _apply(conn, ops, migration)
        version = migration.version
        _write_version(conn, version)

    return version


def _apply(conn: Connection, ops: Operations, migration: Migration) -> None:
    present = {col["name"] for col in sa.inspect(conn).get_columns(migration.table)}
    for make_column in migration.columns:
        column = make_column()
        if column.name in present:
            logger.debug("migration %d: %s.%s already present", migration.version, migration.table, column.name)
            continue
        try:
            ops.add_column(migration.table, column)
        except OperationalError as exc:
            # Another caller added it between the probe and the ALTER
            if "duplicate column" not in str(exc.orig).lower():
                raise
            logger.debug("migration %d: %s.%s added concurrently", migration.version, migration.table, column.name)
            continue
        logger.info(
            "migration %d (%s): added column %s.%s",
            migration.version, migration.description, migration.table, column.name,
        )


def _read_version(conn: Connection) -> Optional[int]:
    if not sa.inspect(conn).has_table(SchemaVersion.__tablename__):
        return None
    row = conn.execute(sa.select(SchemaVersion.version).where(SchemaVersion.id == 1)).first()
    return None if row is None else int(row[0])


def _write_version(conn: Connection, version: int) -> None:
    updated = conn.execute(
        sa.update(SchemaVersion).where(SchemaVersion.id == 1).values(version=version)
    )
    if updated.rowcount == 0:
        conn.execute(sa.insert(SchemaVersion).values(id=1, version=version))
