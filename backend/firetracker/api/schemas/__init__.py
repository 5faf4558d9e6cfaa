from .common import (
    SuccessResponse,
    CreatedResponse,
    ErrorResponse,
    HealthResponse,
    SystemInfoResponse
)
from .auth import (
    AuthenticateRequest,
    AuthenticateResponse,
    StationLoginRequest,
    StationLoginResponse
)
from .personnel import (
    FirefighterCreate,
    FirefighterCreatedResponse,
    PinReset
)
from .operations import (
    IncidentCreate,
    IncidentAttendeeCreate,
    EventCreate,
    EventAttendeeCreate,
    ApparatusCreate
)

__all__ = [
    "SuccessResponse",
    "CreatedResponse",
    "ErrorResponse",
    "HealthResponse",
    "SystemInfoResponse",
    "AuthenticateRequest",
    "AuthenticateResponse",
    "StationLoginRequest",
    "StationLoginResponse",
    "FirefighterCreate",
    "FirefighterCreatedResponse",
    "PinReset",
    "IncidentCreate",
    "IncidentAttendeeCreate",
    "EventCreate",
    "EventAttendeeCreate",
    "ApparatusCreate"
]
