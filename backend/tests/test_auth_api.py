import pytest
from httpx import AsyncClient

from firetracker.db import Database

from .conftest import count_rows, make_client

AUTH_URL = "/api/firefighters/authenticate"


@pytest.mark.asyncio
async def test_authenticate_success(client: AsyncClient):
    response = await client.post(AUTH_URL, json={"badge": "001", "pin": "1234"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["record"]["badge"] == "001"
    assert data["record"]["name"] == "John Smith"
    assert "pin_hash" not in data["record"]


@pytest.mark.asyncio
async def test_authenticate_accepts_secret_alias(client: AsyncClient):
    response = await client.post(AUTH_URL, json={"badge": "002", "secret": "2345"})

    assert response.status_code == 200
    assert response.json()["success"] is True


@pytest.mark.asyncio
async def test_authenticate_missing_credentials(client: AsyncClient):
    response = await client.post(AUTH_URL, json={"badge": "001"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Badge and PIN are required"}


@pytest.mark.asyncio
async def test_authenticate_empty_body(client: AsyncClient):
    response = await client.post(AUTH_URL)

    assert response.status_code == 400
    assert response.json()["error"] == "Badge and PIN are required"


@pytest.mark.asyncio
@pytest.mark.parametrize("kwargs", [
    {"json": {"badge": 1, "pin": 1234}},
    {"json": ["001", "1234"]},
    {"content": "{not json", "headers": {"content-type": "application/json"}},
])
async def test_authenticate_malformed_body_is_logged(settings, client: AsyncClient, kwargs):
    response = await client.post(AUTH_URL, **kwargs)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Badge and PIN are required"}

    db = Database(settings.DATABASE_PATH)
    assert await count_rows(db, "auth_logs") == 1
    assert await count_rows(db, "auth_logs", "WHERE failure_reason = 'missing credentials'") == 1


@pytest.mark.asyncio
async def test_authenticate_unknown_badge(client: AsyncClient):
    response = await client.post(AUTH_URL, json={"badge": "999", "pin": "1234"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid badge number"}


@pytest.mark.asyncio
async def test_authenticate_wrong_pin(client: AsyncClient):
    response = await client.post(AUTH_URL, json={"badge": "001", "pin": "0000"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid PIN"}


@pytest.mark.asyncio
async def test_lockout_scenario(client: AsyncClient):
    """Five wrong PINs lock the account; the correct PIN is then refused"""
    for _ in range(4):
        response = await client.post(AUTH_URL, json={"badge": "003", "pin": "0000"})
        assert response.status_code == 401

    response = await client.post(AUTH_URL, json={"badge": "003", "pin": "0000"})
    assert response.status_code == 423
    assert response.json()["error"] == "Account locked due to multiple failed attempts. Contact administrator."

    response = await client.post(AUTH_URL, json={"badge": "003", "pin": "3456"})
    assert response.status_code == 423
    assert response.json()["error"] == "Account is locked. Contact administrator."


@pytest.mark.asyncio
async def test_generic_errors_setting(settings):
    settings.GENERIC_AUTH_ERRORS = True

    async for client in make_client(settings):
        unknown = await client.post(AUTH_URL, json={"badge": "999", "pin": "1234"})
        wrong = await client.post(AUTH_URL, json={"badge": "001", "pin": "0000"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()["error"] == wrong.json()["error"] == "Invalid badge or PIN"


@pytest.mark.asyncio
async def test_rate_limit(settings):
    settings.RATE_LIMIT_ENABLED = True
    settings.AUTH_RATE_LIMIT = "3/minute"

    async for client in make_client(settings):
        for _ in range(3):
            response = await client.post(AUTH_URL, json={"badge": "001", "pin": "1234"})
            assert response.status_code == 200

        response = await client.post(AUTH_URL, json={"badge": "001", "pin": "1234"})

    assert response.status_code == 429
    assert response.json()["error"] == "Too many authentication attempts, please try again later."


@pytest.mark.asyncio
async def test_general_rate_limit(settings):
    settings.RATE_LIMIT_ENABLED = True
    settings.RATE_LIMIT_DEFAULT = "2/minute"

    async for client in make_client(settings):
        for _ in range(2):
            response = await client.get("/api/stations")
            assert response.status_code == 200

        response = await client.get("/api/stations")
        # The authentication endpoint counts against its own limit
        auth = await client.post(AUTH_URL, json={"badge": "001", "pin": "1234"})

    assert response.status_code == 429
    assert response.json() == {"success": False, "error": "Too many requests, please try again later."}
    assert auth.status_code == 200


@pytest.mark.asyncio
async def test_station_login(client: AsyncClient):
    response = await client.post(
        "/api/station/login", json={"stationName": "Station 2", "password": "station2pass"}
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "station_name": "Station 2"}

    response = await client.post(
        "/api/station/login", json={"station_name": "Station 2", "password": "nope"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid station credentials"
