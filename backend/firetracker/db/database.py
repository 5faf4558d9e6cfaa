import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import aiosqlite

DEFAULT_TIMEOUT = 30.0


class Database:
    """Storage capability handed to every component that touches SQLite.

    Each operation opens its own connection, so concurrent requests never
    share a transaction. Use ``transaction()`` when several statements must
    commit or roll back together.
    """

    def __init__(self, db_path: str, timeout: float = DEFAULT_TIMEOUT):
        self.db_path = db_path
        self.timeout = timeout
        self._ensure_directory()

    def _ensure_directory(self):
        """Ensure the directory holding the database file exists"""
        if self.db_path == ":memory:":
            return
        directory = os.path.dirname(os.path.abspath(self.db_path))
        os.makedirs(directory, exist_ok=True)

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection with row access by column name"""
        connection = await aiosqlite.connect(self.db_path, timeout=self.timeout)
        try:
            connection.row_factory = aiosqlite.Row
            await connection.execute("PRAGMA foreign_keys = ON")
            yield connection
        finally:
            await connection.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Connection whose work is committed on exit, rolled back on error"""
        async with self.connect() as connection:
            try:
                yield connection
            except BaseException:
                await connection.rollback()
                raise
            else:
                await connection.commit()

    async def execute(self, query: str, params: tuple = ()) -> int:
        """Execute a write and return the number of affected rows"""
        async with self.transaction() as connection:
            cursor = await connection.execute(query, params)
            return cursor.rowcount

    async def insert(self, query: str, params: tuple = ()) -> Optional[int]:
        """Execute an INSERT and return the new row id"""
        async with self.transaction() as connection:
            cursor = await connection.execute(query, params)
            return cursor.lastrowid

    async def fetch_one(self, query: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        """Fetch one row"""
        async with self.connect() as connection:
            cursor = await connection.execute(query, params)
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def fetch_all(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        """Fetch all rows"""
        async with self.connect() as connection:
            cursor = await connection.execute(query, params)
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def ping(self) -> bool:
        """Run a trivial query; raises if the database is unreachable"""
        await self.fetch_one("SELECT 1 AS ok")
        return True
