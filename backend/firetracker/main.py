import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from firetracker.api.api import build_api_router
from firetracker.api.errors import (
    general_exception_handler,
    http_exception_handler,
    storage_exception_handler,
    tracker_exception_handler,
    validation_exception_handler
)
from firetracker.core.config import Settings, get_settings
from firetracker.core.exceptions import FireTrackerError, StorageError
from firetracker.core.logging_config import configure_logging
from firetracker.core.middleware import RequestLoggingMiddleware
from firetracker.core.rate_limiter import configure_rate_limiting, limiter, rate_limit_exceeded_handler
from firetracker.db import Database, run_migrations
from firetracker.services.auth_service import AuthenticationGuard

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Tests pass their own settings."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_logging(settings)
        logger.info(f"Starting {settings.APP_NAME} v{settings.VERSION}")

        db = Database(settings.DATABASE_PATH)

        # A failed migration propagates and the server refuses to start
        schema_version = await run_migrations(db, bcrypt_rounds=settings.BCRYPT_ROUNDS)
        logger.info(f"Database ready at schema version {schema_version} ({settings.DATABASE_PATH})")

        app.state.db = db
        app.state.schema_version = schema_version
        app.state.auth_guard = AuthenticationGuard.from_settings(db, settings)
        app.state.started_at = time.monotonic()

        yield

        # Shutdown
        logger.info(f"Shutting down {settings.APP_NAME}")

    app = FastAPI(
        title=settings.APP_NAME,
        description="Personnel, incident and training records for a fire department",
        version=settings.VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings

    # Rate limiter state and exception handler
    configure_rate_limiting(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(RequestLoggingMiddleware)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    # Add exception handlers
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(FireTrackerError, tracker_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include API routes
    app.include_router(build_api_router(settings.API_PREFIX))

    @app.get("/")
    async def root():
        return {
            "message": settings.APP_NAME,
            "version": settings.VERSION,
            "status": "operational",
            "docs_url": "/docs"
        }

    return app
