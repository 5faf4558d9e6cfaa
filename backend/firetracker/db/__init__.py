from .database import Database
from .migrations import run_migrations, get_current_version, MIGRATIONS, LATEST_VERSION

__all__ = [
    "Database",
    "run_migrations",
    "get_current_version",
    "MIGRATIONS",
    "LATEST_VERSION"
]
