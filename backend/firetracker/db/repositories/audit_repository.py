import json
from typing import Any, Dict, Optional

import aiosqlite

from ..database import Database


class AuditRepository:
    """Repository for the administrative audit trail"""

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    async def record_with(
        connection: aiosqlite.Connection,
        user_badge: Optional[str],
        action: str,
        table_name: str,
        record_id: Optional[str],
        old_values: Optional[Dict[str, Any]] = None,
        new_values: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ):
        """Write an audit entry on an open connection, inside the caller's transaction"""
        await connection.execute(
            """INSERT INTO audit_log
               (user_badge, action, table_name, record_id, old_values, new_values, ip_address, user_agent)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                user_badge, action, table_name, record_id,
                json.dumps(old_values) if old_values else None,
                json.dumps(new_values) if new_values else None,
                ip_address, user_agent
            )
        )

    async def record(self, user_badge: Optional[str], action: str, table_name: str,
                     record_id: Optional[str], **kwargs):
        """Write an audit entry in its own transaction"""
        async with self.db.transaction() as connection:
            await self.record_with(connection, user_badge, action, table_name, record_id, **kwargs)
