from typing import Any, Dict, List, Optional

import aiosqlite

from ...core.exceptions import DuplicateRecordError, RecordNotFoundError
from ..database import Database


class IncidentRepository:
    """Repository for incidents and the personnel who responded to them"""

    def __init__(self, db: Database):
        self.db = db

    async def list(self, active: Optional[bool] = None, limit: int = 50) -> List[Dict[str, Any]]:
        """List incidents, newest first, each with its attendees"""
        query = "SELECT * FROM incidents"
        params: list = []

        if active is not None:
            query += " WHERE active = ?"
            params.append(1 if active else 0)

        query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        params.append(limit)

        incidents = await self.db.fetch_all(query, tuple(params))
        if not incidents:
            return []

        ids = [incident["id"] for incident in incidents]
        placeholders = ", ".join("?" for _ in ids)
        attendees = await self.db.fetch_all(
            f"""SELECT incident_id, badge, name, station, role, check_in_time
                FROM attendees WHERE incident_id IN ({placeholders})
                ORDER BY check_in_time ASC, id ASC""",
            tuple(ids)
        )

        by_incident: Dict[str, List[Dict[str, Any]]] = {incident_id: [] for incident_id in ids}
        for attendee in attendees:
            incident_id = attendee.pop("incident_id")
            by_incident[incident_id].append(attendee)

        for incident in incidents:
            incident["attendees"] = by_incident[incident["id"]]
            incident["attendee_count"] = len(incident["attendees"])
            incident["active"] = bool(incident["active"])

        return incidents

    async def get(self, incident_id: str) -> Optional[Dict[str, Any]]:
        return await self.db.fetch_one("SELECT * FROM incidents WHERE id = ?", (incident_id,))

    async def create(
        self,
        incident_id: str,
        location: str,
        incident_type: str,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        created_by: Optional[str] = None
    ) -> str:
        try:
            await self.db.insert(
                """INSERT INTO incidents (id, location, incident_type, description, priority, created_by)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (incident_id, location, incident_type, description, priority or "Medium", created_by)
            )
        except aiosqlite.IntegrityError as e:
            raise DuplicateRecordError("Incident already exists") from e
        return incident_id

    async def add_attendee(
        self,
        incident_id: str,
        firefighter: Dict[str, Any],
        role: Optional[str] = None,
        apparatus: Optional[str] = None
    ) -> int:
        """Record that a firefighter responded to an incident"""
        if not await self.get(incident_id):
            raise RecordNotFoundError("Incident not found")

        return await self.db.insert(
            """INSERT INTO attendees (incident_id, badge, name, station, role, apparatus)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                incident_id, firefighter["badge"], firefighter["name"],
                firefighter.get("station"), role, apparatus
            )
        )
