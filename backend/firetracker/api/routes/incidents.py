from fastapi import APIRouter, Depends, Path, Query, Request
from typing import Optional, List, Dict, Any

from firetracker.api.dependencies import (
    get_db,
    get_incident_repository,
    get_personnel_repository,
    request_origin
)
from firetracker.api.schemas import CreatedResponse, IncidentAttendeeCreate, IncidentCreate
from firetracker.core.exceptions import RecordNotFoundError
from firetracker.db.database import Database
from firetracker.db.repositories import AuditRepository, IncidentRepository, PersonnelRepository

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("", response_model=List[Dict[str, Any]])
async def list_incidents(
    active: Optional[bool] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    incidents: IncidentRepository = Depends(get_incident_repository)
):
    """List incidents with the personnel who attended"""
    return await incidents.list(active=active, limit=limit)


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_incident(
    request: Request,
    incident: IncidentCreate,
    incidents: IncidentRepository = Depends(get_incident_repository),
    db: Database = Depends(get_db)
):
    incident_id = await incidents.create(
        incident_id=incident.id,
        location=incident.location,
        incident_type=incident.incident_type,
        description=incident.description,
        priority=incident.priority,
        created_by=incident.created_by
    )

    origin = request_origin(request)
    await AuditRepository(db).record(
        incident.created_by, "CREATE", "incidents", incident_id,
        new_values=incident.model_dump(),
        ip_address=origin.ip_address,
        user_agent=origin.user_agent
    )

    return CreatedResponse(id=incident_id)


@router.post("/{incident_id}/attendees", response_model=CreatedResponse, status_code=201)
async def add_incident_attendee(
    attendee: IncidentAttendeeCreate,
    incident_id: str = Path(...),
    incidents: IncidentRepository = Depends(get_incident_repository),
    personnel: PersonnelRepository = Depends(get_personnel_repository)
):
    """Record a firefighter's response to an incident"""
    firefighter = await personnel.get(attendee.badge)
    if not firefighter:
        raise RecordNotFoundError("Firefighter not found")

    attendee_id = await incidents.add_attendee(
        incident_id, firefighter, role=attendee.role, apparatus=attendee.apparatus
    )
    return CreatedResponse(id=attendee_id)
