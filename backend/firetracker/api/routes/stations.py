from fastapi import APIRouter, Depends, Query, Request
from typing import Optional, List, Dict, Any

from firetracker.api.dependencies import get_db, get_station_repository, request_origin
from firetracker.api.schemas import ApparatusCreate, CreatedResponse
from firetracker.db.database import Database
from firetracker.db.repositories import AuditRepository, StationRepository

router = APIRouter(tags=["stations"])


@router.get("/stations", response_model=List[Dict[str, Any]])
async def list_stations(stations: StationRepository = Depends(get_station_repository)):
    return await stations.list()


@router.get("/apparatus", response_model=List[Dict[str, Any]])
async def list_apparatus(
    station: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    stations: StationRepository = Depends(get_station_repository)
):
    """List apparatus, optionally for one station or status"""
    return await stations.list_apparatus(station=station, status=status)


@router.post("/apparatus", response_model=CreatedResponse, status_code=201)
async def create_apparatus(
    request: Request,
    apparatus: ApparatusCreate,
    stations: StationRepository = Depends(get_station_repository),
    db: Database = Depends(get_db)
):
    apparatus_id = await stations.create_apparatus(**apparatus.model_dump())

    origin = request_origin(request)
    await AuditRepository(db).record(
        None, "CREATE", "apparatus", str(apparatus_id),
        new_values=apparatus.model_dump(),
        ip_address=origin.ip_address,
        user_agent=origin.user_agent
    )

    return CreatedResponse(id=apparatus_id)
