"""
Command line entry point for Fire Department Tracker.

Usage:
    firetracker migrate              # Bring the database schema up to date
    firetracker cleanup              # Purge auth/audit logs past retention
    firetracker serve                # Run the API server
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from firetracker.core.config import Settings, get_settings
from firetracker.core.exceptions import InvalidInputError, MigrationStepError
from firetracker.core.logging_config import configure_logging
from firetracker.db import Database, LATEST_VERSION, run_migrations
from firetracker.services.maintenance_service import MaintenanceService


async def migrate(settings: Settings) -> int:
    """Run pending migrations; 1 on failure"""
    print(f"[Migrate] Database: {settings.DATABASE_PATH}")
    db = Database(settings.DATABASE_PATH)

    try:
        version = await run_migrations(db, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    except MigrationStepError as e:
        print(f"[Migrate] ERROR: {e}")
        return 1

    if version > LATEST_VERSION:
        print(f"[Migrate] Database is at version {version}, newer than this release ({LATEST_VERSION})")
    else:
        print(f"[Migrate] Database is at version {version}")
    return 0


async def cleanup(settings: Settings, auth_days: Optional[int], audit_days: Optional[int]) -> int:
    """Delete authentication and audit log entries past retention"""
    db = Database(settings.DATABASE_PATH)
    maintenance = MaintenanceService(db)

    try:
        removed = await maintenance.cleanup(
            auth_days if auth_days is not None else settings.AUTH_LOG_RETENTION_DAYS,
            audit_days if audit_days is not None else settings.AUDIT_LOG_RETENTION_DAYS
        )
    except InvalidInputError as e:
        print(f"[Cleanup] ERROR: {e}")
        return 1

    for table, count in removed.items():
        print(f"[Cleanup] {table}: removed {count} rows")
    return 0


def serve(settings: Settings, host: Optional[str], port: Optional[int], reload: bool) -> int:
    import uvicorn

    if reload:
        uvicorn.run(
            "firetracker.main:create_app",
            factory=True,
            host=host or settings.HOST,
            port=port or settings.PORT,
            reload=True
        )
    else:
        from firetracker.main import create_app
        uvicorn.run(create_app(settings), host=host or settings.HOST, port=port or settings.PORT)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="firetracker", description="Fire Department Tracker")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending schema migrations")

    cleanup_parser = subparsers.add_parser("cleanup", help="Purge old authentication and audit logs")
    cleanup_parser.add_argument("--auth-days", type=int, help="Keep this many days of authentication attempts")
    cleanup_parser.add_argument("--audit-days", type=int, help="Keep this many days of audit entries")

    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    return parser


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    configure_logging(settings)

    if args.command == "migrate":
        return asyncio.run(migrate(settings))
    if args.command == "cleanup":
        return asyncio.run(cleanup(settings, args.auth_days, args.audit_days))
    return serve(settings, args.host, args.port, args.reload)


if __name__ == "__main__":
    sys.exit(main())
