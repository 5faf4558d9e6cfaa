import logging
from typing import Dict

import aiosqlite

from ..core.exceptions import InvalidInputError, StorageError
from ..db.database import Database

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Retention cleanup for the authentication and audit logs"""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _check_retention(retention_days: int):
        if retention_days < 1:
            raise InvalidInputError("Retention must be at least one day")

    async def _purge(self, table: str, time_column: str, retention_days: int) -> int:
        self._check_retention(retention_days)

        try:
            deleted = await self.db.execute(
                f"DELETE FROM {table} WHERE {time_column} < datetime('now', ?)",
                (f"-{retention_days} days",)
            )
        except aiosqlite.Error as e:
            logger.error(f"Cleanup of {table} failed: {e}")
            raise StorageError(f"Cleanup of {table} failed") from e

        logger.info(f"Removed {deleted} {table} rows older than {retention_days} days")
        return deleted

    async def cleanup_auth_logs(self, retention_days: int = 90) -> int:
        """Delete authentication attempts older than the retention window"""
        return await self._purge("auth_logs", "attempt_time", retention_days)

    async def cleanup_audit_logs(self, retention_days: int = 365) -> int:
        """Delete audit entries older than the retention window"""
        return await self._purge("audit_log", "timestamp", retention_days)

    async def cleanup(self, auth_retention_days: int, audit_retention_days: int) -> Dict[str, int]:
        self._check_retention(auth_retention_days)
        self._check_retention(audit_retention_days)
        return {
            "auth_logs": await self.cleanup_auth_logs(auth_retention_days),
            "audit_log": await self.cleanup_audit_logs(audit_retention_days)
        }
