from .auth_service import AuthenticationGuard, AuthOutcome, RequestOrigin
from .maintenance_service import MaintenanceService

__all__ = [
    "AuthenticationGuard",
    "AuthOutcome",
    "RequestOrigin",
    "MaintenanceService"
]
