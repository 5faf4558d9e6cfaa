"""Database migration system.

Each step moves the store from version ``n - 1`` to ``n`` and must be safe to
re-apply: the version marker is written once, after every pending step has
succeeded, so a crashed run leaves already-applied steps behind and the next
run applies them again.
"""
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, NamedTuple, Optional

import aiosqlite

from ..core.exceptions import MigrationStepError
from .database import Database
from .schema import (
    INITIAL_TABLES, CREDENTIAL_COLUMNS, AUTH_LOGS_TABLE, PIN_RESET_LOGS_TABLE,
    AUTH_INDEXES, SETTINGS_TABLE, AUDIT_LOG_TABLE, APPARATUS_TABLE,
    MAINTENANCE_LOGS_TABLE, ENTERPRISE_INDEXES, script
)
from .seed import seed_reference_data

logger = logging.getLogger(__name__)

VERSION_TABLE = "db_version"

# Errors SQLite raises when a step's change is already present
ALREADY_APPLIED_ERRORS = (
    "duplicate column name",
    "already exists",
)

SeedHook = Callable[[aiosqlite.Connection, int], Awaitable[int]]


class Migration(NamedTuple):
    version: int
    description: str
    up_sql: str
    seed: Optional[SeedHook] = None


MIGRATIONS: List[Migration] = [
    Migration(
        1,
        "Initial schema and reference data",
        script(INITIAL_TABLES, CREDENTIAL_COLUMNS),
        seed_reference_data
    ),
    Migration(
        2,
        "Add authentication features",
        script(CREDENTIAL_COLUMNS, AUTH_LOGS_TABLE, PIN_RESET_LOGS_TABLE, AUTH_INDEXES)
    ),
    Migration(
        3,
        "Add enterprise features",
        script(SETTINGS_TABLE, AUDIT_LOG_TABLE, APPARATUS_TABLE, MAINTENANCE_LOGS_TABLE, ENTERPRISE_INDEXES)
    ),
]

LATEST_VERSION = max(m.version for m in MIGRATIONS)


def split_statements(sql: str) -> List[str]:
    """Split a script into statements, dropping comment lines"""
    lines = [line for line in sql.splitlines() if not line.strip().startswith("--")]
    return [stmt.strip() for stmt in "\n".join(lines).split(";") if stmt.strip()]


async def get_current_version(connection: aiosqlite.Connection) -> int:
    """Get current schema version; 0 when the version table does not exist"""
    cursor = await connection.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
        (VERSION_TABLE,)
    )
    if await cursor.fetchone() is None:
        return 0

    cursor = await connection.execute(f"SELECT MAX(version) AS version FROM {VERSION_TABLE}")
    row = await cursor.fetchone()
    return row["version"] if row and row["version"] else 0


async def set_current_version(connection: aiosqlite.Connection, version: int):
    """Replace the stored version marker"""
    await connection.execute(
        f"CREATE TABLE IF NOT EXISTS {VERSION_TABLE} (version INTEGER NOT NULL, updated_at TEXT)"
    )
    await connection.execute(f"DELETE FROM {VERSION_TABLE}")
    await connection.execute(
        f"INSERT INTO {VERSION_TABLE} (version, updated_at) VALUES (?, ?)",
        (version, datetime.now().isoformat())
    )
    await connection.commit()


async def apply_migration(connection: aiosqlite.Connection, migration: Migration, bcrypt_rounds: int = 12):
    """Apply a single migration step"""
    try:
        for statement in split_statements(migration.up_sql):
            try:
                await connection.execute(statement)
            except aiosqlite.OperationalError as e:
                error_msg = str(e).lower()
                if any(phrase in error_msg for phrase in ALREADY_APPLIED_ERRORS):
                    logger.debug("Migration %d: skipping statement (already applied): %s",
                                 migration.version, statement.splitlines()[0])
                    continue
                raise

        if migration.seed is not None:
            await migration.seed(connection, bcrypt_rounds)

        await connection.commit()
    except Exception as e:
        await connection.rollback()
        logger.error("Migration %d (%s) failed: %s", migration.version, migration.description, e)
        raise MigrationStepError(migration.version, migration.description, e) from e

    logger.info("Applied migration %d: %s", migration.version, migration.description)


async def run_migrations(
    db: Database,
    migrations: Optional[List[Migration]] = None,
    bcrypt_rounds: int = 12
) -> int:
    """Run all pending migrations and return the resulting version.

    Raises MigrationStepError if any step fails; the version marker is then
    left at its previous value.
    """
    migrations = sorted(migrations if migrations is not None else MIGRATIONS, key=lambda m: m.version)
    target_version = max((m.version for m in migrations), default=0)

    async with db.connect() as connection:
        current_version = await get_current_version(connection)
        logger.info("Current database version: %d", current_version)

        if current_version > target_version:
            logger.warning(
                "Database version %d is newer than the latest known migration %d; leaving it untouched",
                current_version, target_version
            )
            return current_version

        pending = [m for m in migrations if m.version > current_version]
        if not pending:
            logger.info("Database is up to date at version %d", current_version)
            return current_version

        for migration in pending:
            logger.info("Running migration to version %d: %s", migration.version, migration.description)
            await apply_migration(connection, migration, bcrypt_rounds)

        await set_current_version(connection, target_version)

    logger.info("Database migrated from version %d to %d", current_version, target_version)
    return target_version
