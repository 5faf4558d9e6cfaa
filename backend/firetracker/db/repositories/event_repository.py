from typing import Any, Dict, List, Optional

from ...core.exceptions import RecordNotFoundError
from ..database import Database


class EventRepository:
    """Repository for training events, meetings and other scheduled activity"""

    def __init__(self, db: Database):
        self.db = db

    async def list(
        self,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
        limit: int = 50
    ) -> List[Dict[str, Any]]:
        """List active events, newest first, each with its attendees"""
        query = "SELECT * FROM events WHERE active = 1"
        params: list = []

        if status:
            query += " AND status = ?"
            params.append(status)

        if event_type:
            query += " AND event_type = ?"
            params.append(event_type)

        query += " ORDER BY start_date DESC, id DESC LIMIT ?"
        params.append(limit)

        events = await self.db.fetch_all(query, tuple(params))
        if not events:
            return []

        ids = [event["id"] for event in events]
        placeholders = ", ".join("?" for _ in ids)
        attendees = await self.db.fetch_all(
            f"""SELECT event_id, badge, name, station, attendance_type, hours_worked
                FROM event_attendees WHERE event_id IN ({placeholders})
                ORDER BY check_in_time ASC, id ASC""",
            tuple(ids)
        )

        by_event: Dict[int, List[Dict[str, Any]]] = {event_id: [] for event_id in ids}
        for attendee in attendees:
            by_event[attendee.pop("event_id")].append(attendee)

        for event in events:
            event["attendees"] = by_event[event["id"]]
            event["attendee_count"] = len(event["attendees"])
            event["active"] = bool(event["active"])

        return events

    async def get(self, event_id: int) -> Optional[Dict[str, Any]]:
        return await self.db.fetch_one(
            "SELECT * FROM events WHERE id = ? AND active = 1", (event_id,)
        )

    async def create(
        self,
        event_name: str,
        event_type: str,
        start_date: str,
        activity_category: Optional[str] = None,
        location: Optional[str] = None,
        end_date: Optional[str] = None,
        description: Optional[str] = None,
        instructor: Optional[str] = None,
        max_attendees: Optional[int] = None,
        created_by_badge: Optional[str] = None
    ) -> int:
        return await self.db.insert(
            """INSERT INTO events
               (event_name, event_type, activity_category, location, start_date, end_date,
                description, instructor, max_attendees, created_by_badge)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                event_name, event_type, activity_category, location, start_date, end_date,
                description, instructor, max_attendees, created_by_badge
            )
        )

    async def add_attendee(
        self,
        event_id: int,
        firefighter: Dict[str, Any],
        attendance_type: Optional[str] = None,
        hours_worked: Optional[float] = None,
        notes: Optional[str] = None
    ) -> int:
        """Record attendance at an event"""
        if not await self.get(event_id):
            raise RecordNotFoundError("Event not found")

        return await self.db.insert(
            """INSERT INTO event_attendees
               (event_id, badge, name, station, attendance_type, hours_worked, notes)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                event_id, firefighter["badge"], firefighter["name"], firefighter.get("station"),
                attendance_type or "present", hours_worked, notes
            )
        )
