import logging
import platform
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from firetracker.api.dependencies import get_app_settings, get_db
from firetracker.api.schemas import HealthResponse, SystemInfoResponse
from firetracker.core.config import Settings
from firetracker.db.database import Database
from firetracker.db.migrations import get_current_version

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

FEATURES = [
    "Badge/PIN Authentication",
    "Multi-Station Support",
    "Incident Management",
    "Event & Training Tracking",
    "Equipment Management",
    "Enterprise Reporting",
    "Audit Logging"
]


def _uptime(request: Request) -> float:
    return round(time.monotonic() - request.app.state.started_at, 3)


@router.get("/health", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
async def health_check(
    request: Request,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    """Health check endpoint"""
    health = HealthResponse(
        version=settings.VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime=_uptime(request)
    )

    try:
        await db.ping()
    except Exception as e:
        logger.error(f"Health check database ping failed: {e}")
        health.status = "unhealthy"
        health.database = "disconnected"
        health.message = "Database connection failed"
        return JSONResponse(status_code=503, content=health.model_dump())

    return health


@router.get("/system/info", response_model=SystemInfoResponse)
async def system_info(
    request: Request,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
):
    """Version, runtime and schema information"""
    async with db.connect() as connection:
        database_version = await get_current_version(connection)

    return SystemInfoResponse(
        version=settings.VERSION,
        python_version=platform.python_version(),
        platform=platform.system().lower(),
        architecture=platform.machine(),
        uptime=_uptime(request),
        database_version=database_version,
        department=settings.DEPARTMENT_NAME,
        features=FEATURES
    )
