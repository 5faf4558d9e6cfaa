from fastapi import APIRouter

from firetracker.api.routes import (
    auth_router,
    personnel_router,
    incidents_router,
    events_router,
    stations_router,
    reports_router,
    health_router
)


def build_api_router(prefix: str = "/api") -> APIRouter:
    """Create the main API router with every route module included"""
    api_router = APIRouter(prefix=prefix)

    # Authentication first so /firefighters/authenticate is matched before /firefighters/{badge}
    api_router.include_router(auth_router)
    api_router.include_router(personnel_router)
    api_router.include_router(incidents_router)
    api_router.include_router(events_router)
    api_router.include_router(stations_router)
    api_router.include_router(reports_router)
    api_router.include_router(health_router)

    return api_router
