"""Baseline reference data written by the first migration step."""
import json
import logging

import aiosqlite

from ..core.security import hash_secret

logger = logging.getLogger(__name__)

DEFAULT_STATIONS = [
    ("Station 1", "123 Fire Station Rd, Downtown", "555-0001", "station1@firedept.gov"),
    ("Station 2", "456 Emergency Ave, Westside", "555-0002", "station2@firedept.gov"),
    ("Station 3", "789 Rescue Blvd, Eastside", "555-0003", "station3@firedept.gov"),
    ("Station 4", "321 Safety St, Northside", "555-0004", "station4@firedept.gov"),
    ("Station 5", "654 Hero Ln, Southside", "555-0005", "station5@firedept.gov"),
]

DEFAULT_STATION_ACCOUNTS = [
    ("Station 1", "station1pass"),
    ("Station 2", "station2pass"),
    ("Station 3", "station3pass"),
    ("Station 4", "station4pass"),
    ("Station 5", "station5pass"),
]

DEFAULT_PERSONNEL = [
    {"badge": "001", "name": "John Smith", "rank": "Captain", "station": "Station 1", "phone": "555-1001", "pin": "1234"},
    {"badge": "002", "name": "Jane Doe", "rank": "Lieutenant", "station": "Station 1", "phone": "555-1002", "pin": "2345"},
    {"badge": "003", "name": "Mike Johnson", "rank": "Firefighter", "station": "Station 2", "phone": "555-1003", "pin": "3456"},
    {"badge": "004", "name": "Sarah Williams", "rank": "Engineer", "station": "Station 2", "phone": "555-1004", "pin": "4567"},
    {"badge": "005", "name": "Tom Brown", "rank": "Firefighter", "station": "Station 3", "phone": "555-1005", "pin": "5678"},
]

DEFAULT_CERTIFICATIONS = ["Basic Firefighter", "CPR", "First Aid"]

DEFAULT_ACTIVITY_CATEGORIES = [
    ("Fire Training", "Fire suppression and prevention training", 4.0),
    ("EMS Training", "Emergency medical services training", 4.0),
    ("Equipment Maintenance", "Equipment checks and maintenance", 2.0),
    ("Community Event", "Public education and community engagement", 3.0),
    ("Physical Training", "Physical fitness and conditioning", 1.0),
]


async def _exists(connection: aiosqlite.Connection, query: str, params: tuple) -> bool:
    cursor = await connection.execute(query, params)
    return await cursor.fetchone() is not None


async def seed_reference_data(connection: aiosqlite.Connection, bcrypt_rounds: int = 12) -> int:
    """Insert default stations, accounts, personnel and categories.

    Rows are keyed by natural identity (station name, badge, category name)
    and only inserted when absent, so re-running never duplicates them.
    Returns the number of rows inserted.
    """
    inserted = 0

    for name, address, phone, email in DEFAULT_STATIONS:
        if not await _exists(connection, "SELECT 1 FROM stations WHERE name = ?", (name,)):
            await connection.execute(
                "INSERT INTO stations (name, address, phone, email) VALUES (?, ?, ?, ?)",
                (name, address, phone, email)
            )
            inserted += 1

    for station_name, password in DEFAULT_STATION_ACCOUNTS:
        if not await _exists(connection, "SELECT 1 FROM station_accounts WHERE station_name = ?", (station_name,)):
            await connection.execute(
                "INSERT INTO station_accounts (station_name, password) VALUES (?, ?)",
                (station_name, hash_secret(password, bcrypt_rounds))
            )
            inserted += 1

    for person in DEFAULT_PERSONNEL:
        if await _exists(connection, "SELECT 1 FROM firefighters WHERE badge = ?", (person["badge"],)):
            continue
        email = f"{person['name'].lower().replace(' ', '.')}@firedept.gov"
        await connection.execute(
            """INSERT INTO firefighters
               (badge, name, email, rank, station, phone, pin_hash, certifications)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                person["badge"], person["name"], email, person["rank"],
                person["station"], person["phone"],
                hash_secret(person["pin"], bcrypt_rounds),
                json.dumps(DEFAULT_CERTIFICATIONS)
            )
        )
        inserted += 1

    for category_name, description, hours in DEFAULT_ACTIVITY_CATEGORIES:
        if not await _exists(connection, "SELECT 1 FROM activity_categories WHERE category_name = ?", (category_name,)):
            await connection.execute(
                """INSERT INTO activity_categories (category_name, description, default_hours)
                   VALUES (?, ?, ?)""",
                (category_name, description, hours)
            )
            inserted += 1

    logger.info("Seeded %d reference rows", inserted)
    return inserted
