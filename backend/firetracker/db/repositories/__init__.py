from .audit_repository import AuditRepository
from .personnel_repository import PersonnelRepository
from .incident_repository import IncidentRepository
from .event_repository import EventRepository
from .station_repository import StationRepository
from .report_repository import ReportRepository

__all__ = [
    "AuditRepository",
    "PersonnelRepository",
    "IncidentRepository",
    "EventRepository",
    "StationRepository",
    "ReportRepository"
]
