import json
from typing import Any, Dict, List, Optional

import aiosqlite

from ...core.exceptions import DuplicateRecordError
from ..database import Database

# Everything except the PIN hash
PUBLIC_COLUMNS = """
    badge, name, rank, station, email, phone, hire_date,
    status, certifications, vacation_days_total, vacation_days_used,
    failed_attempts, account_locked, last_failed_attempt, created_at
"""


def parse_certifications(row: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the certifications JSON column into a list"""
    raw = row.get("certifications")
    try:
        row["certifications"] = json.loads(raw) if raw else []
    except (TypeError, ValueError):
        row["certifications"] = []
    return row


class PersonnelRepository:
    """Repository for firefighter records"""

    def __init__(self, db: Database):
        self.db = db

    async def list(
        self,
        station: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """List firefighters, optionally filtered by station, status or a search term"""
        query = f"SELECT {PUBLIC_COLUMNS} FROM firefighters"
        conditions = []
        params: list = []

        if station:
            conditions.append("station = ?")
            params.append(station)

        if status:
            conditions.append("status = ?")
            params.append(status)

        if search:
            conditions.append("(name LIKE ? OR badge LIKE ? OR rank LIKE ?)")
            pattern = f"%{search}%"
            params.extend([pattern, pattern, pattern])

        if conditions:
            query += " WHERE " + " AND ".join(conditions)

        query += " ORDER BY name ASC"

        rows = await self.db.fetch_all(query, tuple(params))
        return [parse_certifications(row) for row in rows]

    async def get(self, badge: str) -> Optional[Dict[str, Any]]:
        """Get one firefighter without secrets"""
        row = await self.db.fetch_one(
            f"SELECT {PUBLIC_COLUMNS} FROM firefighters WHERE badge = ?", (badge,)
        )
        return parse_certifications(row) if row else None

    async def create(
        self,
        badge: str,
        name: str,
        pin_hash: str,
        email: Optional[str] = None,
        rank: Optional[str] = None,
        station: Optional[str] = None,
        phone: Optional[str] = None,
        certifications: Optional[List[str]] = None
    ) -> str:
        """Insert a firefighter; raises DuplicateRecordError on a taken badge or email"""
        try:
            await self.db.insert(
                """INSERT INTO firefighters
                   (badge, name, email, rank, station, phone, pin_hash, certifications, hire_date)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, DATE('now'))""",
                (
                    badge, name, email, rank or "Firefighter", station, phone, pin_hash,
                    json.dumps(certifications or [])
                )
            )
        except aiosqlite.IntegrityError as e:
            if "email" in str(e):
                raise DuplicateRecordError("Email already exists") from e
            raise DuplicateRecordError("Badge number already exists") from e
        return badge
