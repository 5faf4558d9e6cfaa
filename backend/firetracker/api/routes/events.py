from fastapi import APIRouter, Depends, Path, Query, Request
from typing import Optional, List, Dict, Any

from firetracker.api.dependencies import (
    get_db,
    get_event_repository,
    get_personnel_repository,
    request_origin
)
from firetracker.api.schemas import CreatedResponse, EventAttendeeCreate, EventCreate
from firetracker.core.exceptions import RecordNotFoundError
from firetracker.db.database import Database
from firetracker.db.repositories import AuditRepository, EventRepository, PersonnelRepository

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=List[Dict[str, Any]])
async def list_events(
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None, description="Event type"),
    limit: int = Query(50, ge=1, le=500),
    events: EventRepository = Depends(get_event_repository)
):
    return await events.list(status=status, event_type=type, limit=limit)


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_event(
    request: Request,
    event: EventCreate,
    events: EventRepository = Depends(get_event_repository),
    db: Database = Depends(get_db)
):
    """Schedule a training event or other activity"""
    event_id = await events.create(**event.model_dump())

    origin = request_origin(request)
    await AuditRepository(db).record(
        event.created_by_badge, "CREATE", "events", str(event_id),
        new_values=event.model_dump(),
        ip_address=origin.ip_address,
        user_agent=origin.user_agent
    )

    return CreatedResponse(id=event_id)


@router.post("/{event_id}/attendees", response_model=CreatedResponse, status_code=201)
async def add_event_attendee(
    attendee: EventAttendeeCreate,
    event_id: int = Path(...),
    events: EventRepository = Depends(get_event_repository),
    personnel: PersonnelRepository = Depends(get_personnel_repository)
):
    firefighter = await personnel.get(attendee.badge)
    if not firefighter:
        raise RecordNotFoundError("Firefighter not found")

    attendee_id = await events.add_attendee(
        event_id,
        firefighter,
        attendance_type=attendee.attendance_type,
        hours_worked=attendee.hours_worked,
        notes=attendee.notes
    )
    return CreatedResponse(id=attendee_id)
