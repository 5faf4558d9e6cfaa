from .auth import router as auth_router
from .personnel import router as personnel_router
from .incidents import router as incidents_router
from .events import router as events_router
from .stations import router as stations_router
from .reports import router as reports_router
from .health import router as health_router

__all__ = [
    "auth_router",
    "personnel_router",
    "incidents_router",
    "events_router",
    "stations_router",
    "reports_router",
    "health_router"
]
