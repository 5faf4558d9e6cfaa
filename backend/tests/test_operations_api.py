from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from firetracker.db import Database

INCIDENT = {
    "id": "INC-2024-0001",
    "location": "12 Main St",
    "incident_type": "Structure Fire",
    "priority": "High",
    "created_by": "001",
}

EVENT = {
    "event_name": "Ladder Drill",
    "event_type": "training",
    "start_date": "2024-03-01T09:00:00",
    "activity_category": "Training Drill",
    "created_by_badge": "002",
}


@pytest.mark.asyncio
async def test_create_and_list_incident(client: AsyncClient):
    response = await client.post("/api/incidents", json=INCIDENT)
    assert response.status_code == 201
    assert response.json() == {"success": True, "id": "INC-2024-0001"}

    response = await client.post(
        "/api/incidents/INC-2024-0001/attendees", json={"badge": "003", "role": "Nozzle"}
    )
    assert response.status_code == 201

    response = await client.get("/api/incidents", params={"active": "true"})
    assert response.status_code == 200
    incidents = response.json()
    assert len(incidents) == 1
    assert incidents[0]["priority"] == "High"
    assert incidents[0]["attendee_count"] == 1
    assert incidents[0]["attendees"][0]["badge"] == "003"
    assert incidents[0]["attendees"][0]["name"] == "Mike Johnson"

    response = await client.get("/api/incidents", params={"active": "false"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_incident_defaults_and_duplicates(client: AsyncClient):
    await client.post("/api/incidents", json={"id": "INC-2", "location": "Pier 4", "incident_type": "Rescue"})
    response = await client.post("/api/incidents", json={"id": "INC-2", "location": "Pier 4", "incident_type": "Rescue"})
    assert response.status_code == 409

    incidents = (await client.get("/api/incidents")).json()
    assert incidents[0]["priority"] == "Medium"


@pytest.mark.asyncio
async def test_incident_missing_fields(client: AsyncClient):
    response = await client.post("/api/incidents", json={"id": "INC-3"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_incident_attendee_not_found(client: AsyncClient):
    await client.post("/api/incidents", json=INCIDENT)

    response = await client.post("/api/incidents/INC-2024-0001/attendees", json={"badge": "999"})
    assert response.status_code == 404
    assert response.json()["error"] == "Firefighter not found"

    response = await client.post("/api/incidents/INC-404/attendees", json={"badge": "001"})
    assert response.status_code == 404
    assert response.json()["error"] == "Incident not found"


@pytest.mark.asyncio
async def test_events(client: AsyncClient):
    response = await client.post("/api/events", json=EVENT)
    assert response.status_code == 201
    event_id = response.json()["id"]

    await client.post("/api/events", json={**EVENT, "event_name": "Budget Meeting", "event_type": "meeting"})

    response = await client.post(
        f"/api/events/{event_id}/attendees", json={"badge": "004", "hours_worked": 2.5}
    )
    assert response.status_code == 201

    response = await client.get("/api/events", params={"type": "training"})
    events = response.json()
    assert len(events) == 1
    assert events[0]["event_name"] == "Ladder Drill"
    assert events[0]["attendee_count"] == 1
    assert events[0]["attendees"][0]["attendance_type"] == "present"

    response = await client.get("/api/events")
    assert len(response.json()) == 2


@pytest.mark.asyncio
async def test_event_attendee_not_found(client: AsyncClient):
    response = await client.post("/api/events/42/attendees", json={"badge": "001"})
    assert response.status_code == 404
    assert response.json()["error"] == "Event not found"


@pytest.mark.asyncio
async def test_stations_and_apparatus(client: AsyncClient):
    response = await client.get("/api/stations")
    assert [s["name"] for s in response.json()] == [f"Station {n}" for n in range(1, 6)]

    response = await client.post(
        "/api/apparatus",
        json={"apparatus_name": "Engine 1", "apparatus_type": "Engine", "station": "Station 1"}
    )
    assert response.status_code == 201

    response = await client.post(
        "/api/apparatus",
        json={"apparatus_name": "Ghost 9", "apparatus_type": "Engine", "station": "Station 99"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Unknown station"

    response = await client.get("/api/apparatus", params={"station": "Station 1"})
    apparatus = response.json()
    assert len(apparatus) == 1
    assert apparatus[0]["status"] == "in_service"


@pytest.mark.asyncio
async def test_creates_are_audited(client: AsyncClient, settings):
    await client.post("/api/incidents", json=INCIDENT)

    db = Database(settings.DATABASE_PATH)
    entry = await db.fetch_one("SELECT * FROM audit_log WHERE table_name = 'incidents'")

    assert entry["action"] == "CREATE"
    assert entry["record_id"] == "INC-2024-0001"
    assert entry["user_badge"] == "001"


@pytest.mark.asyncio
async def test_activity_summary(client: AsyncClient):
    await client.post("/api/incidents", json=INCIDENT)
    await client.post("/api/events", json=EVENT)

    today = date.today()
    response = await client.get(
        "/api/reports/activity-summary",
        params={
            "start_date": (today - timedelta(days=1)).isoformat(),
            "end_date": (today + timedelta(days=1)).isoformat()
        }
    )

    assert response.status_code == 200
    rows = {row["type"]: row for row in response.json()}
    assert rows["incidents"]["count"] == 1
    assert rows["events"]["count"] == 1


@pytest.mark.asyncio
async def test_personnel_stats(client: AsyncClient):
    response = await client.get("/api/reports/personnel-stats")

    assert response.status_code == 200
    by_station = {row["station"]: row for row in response.json()}
    assert by_station["Station 1"]["total_personnel"] == 2
    assert by_station["Station 3"]["active_personnel"] == 1
    assert by_station["Station 2"]["locked_accounts"] == 0
