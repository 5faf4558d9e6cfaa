from fastapi import APIRouter, Depends, Path, Query, Request
from typing import Optional, List, Dict, Any

from firetracker.api.dependencies import (
    get_auth_guard,
    get_db,
    get_personnel_repository,
    request_origin
)
from firetracker.api.schemas import FirefighterCreate, FirefighterCreatedResponse, PinReset, SuccessResponse
from firetracker.core.exceptions import RecordNotFoundError
from firetracker.db.database import Database
from firetracker.db.repositories import AuditRepository, PersonnelRepository
from firetracker.services.auth_service import AuthenticationGuard

router = APIRouter(prefix="/firefighters", tags=["personnel"])


@router.get("", response_model=List[Dict[str, Any]])
async def list_firefighters(
    station: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches name, badge or rank"),
    personnel: PersonnelRepository = Depends(get_personnel_repository)
):
    """List firefighters; PIN hashes are never included"""
    return await personnel.list(station=station, status=status, search=search)


@router.get("/{badge}", response_model=Dict[str, Any])
async def get_firefighter(
    badge: str = Path(..., description="Badge number"),
    personnel: PersonnelRepository = Depends(get_personnel_repository)
):
    firefighter = await personnel.get(badge)
    if not firefighter:
        raise RecordNotFoundError("Firefighter not found")
    return firefighter


@router.post("", response_model=FirefighterCreatedResponse, status_code=201)
async def create_firefighter(
    request: Request,
    firefighter: FirefighterCreate,
    personnel: PersonnelRepository = Depends(get_personnel_repository),
    guard: AuthenticationGuard = Depends(get_auth_guard),
    db: Database = Depends(get_db)
):
    """Add a firefighter with an initial PIN"""
    pin_hash = await guard.hash_pin(firefighter.pin)

    badge = await personnel.create(
        badge=firefighter.badge,
        name=firefighter.name,
        pin_hash=pin_hash,
        email=firefighter.email,
        rank=firefighter.rank,
        station=firefighter.station,
        phone=firefighter.phone,
        certifications=firefighter.certifications
    )

    origin = request_origin(request)
    await AuditRepository(db).record(
        None, "CREATE", "firefighters", badge,
        new_values=firefighter.model_dump(exclude={"pin"}),
        ip_address=origin.ip_address,
        user_agent=origin.user_agent
    )

    return FirefighterCreatedResponse(badge=badge)


@router.put("/{badge}/pin", response_model=SuccessResponse)
async def reset_pin(
    request: Request,
    reset: PinReset,
    badge: str = Path(..., description="Badge number"),
    guard: AuthenticationGuard = Depends(get_auth_guard)
):
    """Set a new PIN and unlock the account"""
    await guard.reset_pin(
        badge,
        reset.new_pin,
        reset_by=reset.admin_badge,
        reason=reset.reason,
        origin=request_origin(request)
    )
    return SuccessResponse()
