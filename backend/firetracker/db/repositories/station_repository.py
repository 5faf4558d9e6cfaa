from typing import Any, Dict, List, Optional

import aiosqlite

from ...core.exceptions import InvalidInputError
from ..database import Database


class StationRepository:
    """Repository for stations, station accounts and apparatus"""

    def __init__(self, db: Database):
        self.db = db

    async def list(self) -> List[Dict[str, Any]]:
        return await self.db.fetch_all("SELECT * FROM stations ORDER BY name ASC")

    async def get_account(self, station_name: str) -> Optional[Dict[str, Any]]:
        return await self.db.fetch_one(
            "SELECT * FROM station_accounts WHERE station_name = ?", (station_name,)
        )

    async def touch_login(self, station_name: str):
        await self.db.execute(
            "UPDATE station_accounts SET last_login = CURRENT_TIMESTAMP WHERE station_name = ?",
            (station_name,)
        )

    async def list_apparatus(
        self,
        station: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        query = "SELECT * FROM apparatus"
        conditions = []
        params: list = []

        if station:
            conditions.append("station = ?")
            params.append(station)

        if status:
            conditions.append("status = ?")
            params.append(status)

        if conditions:
            query += " WHERE " + " AND ".join(conditions)

        query += " ORDER BY station ASC, apparatus_name ASC"
        return await self.db.fetch_all(query, tuple(params))

    async def create_apparatus(
        self,
        apparatus_name: str,
        apparatus_type: str,
        station: Optional[str] = None,
        status: Optional[str] = None,
        year: Optional[int] = None,
        make: Optional[str] = None,
        model: Optional[str] = None
    ) -> int:
        try:
            return await self.db.insert(
                """INSERT INTO apparatus (apparatus_name, apparatus_type, station, status, year, make, model)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (apparatus_name, apparatus_type, station, status or "in_service", year, make, model)
            )
        except aiosqlite.IntegrityError as e:
            raise InvalidInputError("Unknown station") from e
