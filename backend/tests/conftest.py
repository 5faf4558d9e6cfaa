"""
Fire Department Tracker - Test Configuration and Fixtures
"""
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport

from firetracker.core.config import Settings
from firetracker.db import Database, run_migrations
from firetracker.main import create_app
from firetracker.services.auth_service import AuthenticationGuard

# Cheapest cost bcrypt accepts
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway database"""
    return Settings(
        DATABASE_PATH=str(tmp_path / "fire_tracker_test.db"),
        BCRYPT_ROUNDS=TEST_BCRYPT_ROUNDS,
        RATE_LIMIT_ENABLED=False,
        LOG_TO_FILE=False,
        LOG_LEVEL="WARNING"
    )


@pytest.fixture
def db(settings: Settings) -> Database:
    """Empty database, no migrations applied"""
    return Database(settings.DATABASE_PATH)


@pytest.fixture
async def migrated_db(db: Database) -> Database:
    """Database at the latest schema version with reference data"""
    await run_migrations(db, bcrypt_rounds=TEST_BCRYPT_ROUNDS)
    return db


@pytest.fixture
def guard(migrated_db: Database, settings: Settings) -> AuthenticationGuard:
    return AuthenticationGuard.from_settings(migrated_db, settings)


async def make_client(settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(settings)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest.fixture
async def client(settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """API client with startup (migrations included) already run"""
    async for ac in make_client(settings):
        yield ac


async def count_rows(db: Database, table: str, where: str = "", params: tuple = ()) -> int:
    row = await db.fetch_one(f"SELECT COUNT(*) AS count FROM {table} {where}", params)
    return row["count"]


async def auth_logs(db: Database, badge: str):
    return await db.fetch_all(
        "SELECT * FROM auth_logs WHERE badge = ? ORDER BY id ASC", (badge,)
    )
