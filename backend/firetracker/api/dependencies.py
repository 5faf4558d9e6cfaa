from fastapi import Request

from firetracker.core.config import Settings
from firetracker.db.database import Database
from firetracker.db.repositories import (
    EventRepository,
    IncidentRepository,
    PersonnelRepository,
    ReportRepository,
    StationRepository,
)
from firetracker.services.auth_service import AuthenticationGuard, RequestOrigin


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_guard(request: Request) -> AuthenticationGuard:
    return request.app.state.auth_guard


def get_personnel_repository(request: Request) -> PersonnelRepository:
    return PersonnelRepository(get_db(request))


def get_incident_repository(request: Request) -> IncidentRepository:
    return IncidentRepository(get_db(request))


def get_event_repository(request: Request) -> EventRepository:
    return EventRepository(get_db(request))


def get_station_repository(request: Request) -> StationRepository:
    return StationRepository(get_db(request))


def get_report_repository(request: Request) -> ReportRepository:
    return ReportRepository(get_db(request))


def request_origin(request: Request) -> RequestOrigin:
    """Client address and user agent for attempt and audit logs"""
    return RequestOrigin(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent")
    )
