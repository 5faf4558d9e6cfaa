import asyncio

import pytest

from firetracker.core.exceptions import (
    AccountLockedError,
    BadgeNotFoundError,
    InvalidInputError,
    InvalidPinError,
    MissingCredentialsError,
    RecordNotFoundError,
    StorageError,
)
from firetracker.services.auth_service import (
    GENERIC_MESSAGE,
    LOCKOUT_MESSAGE,
    AuthenticationGuard,
    RequestOrigin,
)

from .conftest import TEST_BCRYPT_ROUNDS, auth_logs, count_rows

ORIGIN = RequestOrigin(ip_address="10.0.0.7", user_agent="pytest")


async def credential_state(db, badge: str) -> dict:
    return await db.fetch_one(
        "SELECT failed_attempts, account_locked, last_failed_attempt FROM firefighters WHERE badge = ?",
        (badge,)
    )


@pytest.mark.asyncio
async def test_correct_pin_succeeds(guard, migrated_db):
    outcome = await guard.authenticate("001", "1234", ORIGIN)

    assert outcome.success is True
    assert outcome.error is None
    assert outcome.record["badge"] == "001"
    assert outcome.record["name"] == "John Smith"
    assert outcome.record["failed_attempts"] == 0
    assert outcome.record["account_locked"] is False
    assert isinstance(outcome.record["certifications"], list)

    logs = await auth_logs(migrated_db, "001")
    assert len(logs) == 1
    assert logs[0]["success"] == 1
    assert logs[0]["failure_reason"] is None
    assert logs[0]["ip_address"] == "10.0.0.7"
    assert logs[0]["user_agent"] == "pytest"


@pytest.mark.asyncio
async def test_record_never_contains_pin_hash(guard):
    outcome = await guard.authenticate("002", "2345", ORIGIN)

    assert outcome.success is True
    assert "pin_hash" not in outcome.record


@pytest.mark.asyncio
async def test_wrong_pin_increments_counter(guard, migrated_db):
    outcome = await guard.authenticate("003", "0000", ORIGIN)

    assert outcome.success is False
    assert isinstance(outcome.error, InvalidPinError)
    assert outcome.error.status_code == 401
    assert outcome.error.message == "Invalid PIN"
    assert outcome.failed_attempts == 1

    state = await credential_state(migrated_db, "003")
    assert state["failed_attempts"] == 1
    assert state["account_locked"] == 0
    assert state["last_failed_attempt"] is not None

    logs = await auth_logs(migrated_db, "003")
    assert [log["failure_reason"] for log in logs] == ["invalid pin"]


@pytest.mark.asyncio
async def test_success_resets_counter(guard, migrated_db):
    for _ in range(3):
        await guard.authenticate("004", "9999", ORIGIN)

    outcome = await guard.authenticate("004", "4567", ORIGIN)

    assert outcome.success is True
    state = await credential_state(migrated_db, "004")
    assert state["failed_attempts"] == 0
    assert state["last_failed_attempt"] is None


@pytest.mark.asyncio
async def test_lockout_after_five_failures(guard, migrated_db):
    """Four failures stay unlocked, the fifth locks, the right PIN no longer helps"""
    for attempt in range(1, 5):
        outcome = await guard.authenticate("005", "1111", ORIGIN)
        assert isinstance(outcome.error, InvalidPinError)
        assert outcome.failed_attempts == attempt

    outcome = await guard.authenticate("005", "1111", ORIGIN)
    assert isinstance(outcome.error, AccountLockedError)
    assert outcome.error.status_code == 423
    assert outcome.error.message == LOCKOUT_MESSAGE
    assert outcome.failed_attempts == 5

    outcome = await guard.authenticate("005", "5678", ORIGIN)
    assert outcome.success is False
    assert isinstance(outcome.error, AccountLockedError)
    assert outcome.error.message == "Account is locked. Contact administrator."

    state = await credential_state(migrated_db, "005")
    assert state["failed_attempts"] == 5
    assert state["account_locked"] == 1

    reasons = [log["failure_reason"] for log in await auth_logs(migrated_db, "005")]
    assert reasons == ["invalid pin"] * 5 + ["account locked"]


@pytest.mark.asyncio
async def test_locked_account_counter_untouched(guard, migrated_db):
    await migrated_db.execute(
        "UPDATE firefighters SET account_locked = 1, failed_attempts = 2 WHERE badge = '001'"
    )

    outcome = await guard.authenticate("001", "0000", ORIGIN)

    assert isinstance(outcome.error, AccountLockedError)
    state = await credential_state(migrated_db, "001")
    assert state["failed_attempts"] == 2


@pytest.mark.asyncio
async def test_unknown_badge(guard, migrated_db):
    before = await migrated_db.fetch_all("SELECT badge, failed_attempts FROM firefighters ORDER BY badge")

    outcome = await guard.authenticate("999", "1234", ORIGIN)

    assert outcome.success is False
    assert isinstance(outcome.error, BadgeNotFoundError)
    assert outcome.error.status_code == 401
    assert outcome.error.message == "Invalid badge number"

    logs = await auth_logs(migrated_db, "999")
    assert len(logs) == 1
    assert logs[0]["failure_reason"] == "badge not found"
    assert logs[0]["success"] == 0

    after = await migrated_db.fetch_all("SELECT badge, failed_attempts FROM firefighters ORDER BY badge")
    assert after == before


@pytest.mark.asyncio
@pytest.mark.parametrize("badge,pin", [
    (None, "1234"),
    ("001", None),
    ("", ""),
    ("   ", "1234"),
    ("002", "   "),
])
async def test_missing_credentials(guard, migrated_db, badge, pin):
    outcome = await guard.authenticate(badge, pin, ORIGIN)

    assert isinstance(outcome.error, MissingCredentialsError)
    assert outcome.error.status_code == 400
    assert outcome.error.message == "Badge and PIN are required"

    logs = await migrated_db.fetch_all("SELECT * FROM auth_logs")
    assert len(logs) == 1
    assert logs[0]["failure_reason"] == "missing credentials"

    assert await count_rows(migrated_db, "firefighters", "WHERE failed_attempts > 0") == 0


@pytest.mark.asyncio
async def test_one_log_entry_per_call(guard, migrated_db):
    calls = [
        ("001", "1234"),
        ("001", "0000"),
        ("404", "1234"),
        (None, None),
        ("002", "2345"),
    ]
    for badge, pin in calls:
        await guard.authenticate(badge, pin, ORIGIN)

    assert await count_rows(migrated_db, "auth_logs") == len(calls)


@pytest.mark.asyncio
async def test_overlong_pin_counts_as_mismatch(guard, migrated_db):
    outcome = await guard.authenticate("001", "9" * 100, ORIGIN)

    assert isinstance(outcome.error, InvalidPinError)
    state = await credential_state(migrated_db, "001")
    assert state["failed_attempts"] == 1


@pytest.mark.asyncio
async def test_generic_error_messages(migrated_db):
    guard = AuthenticationGuard(migrated_db, bcrypt_rounds=TEST_BCRYPT_ROUNDS, generic_errors=True)

    unknown = await guard.authenticate("999", "1234", ORIGIN)
    wrong = await guard.authenticate("001", "0000", ORIGIN)

    assert unknown.error.message == wrong.error.message == GENERIC_MESSAGE
    assert unknown.error.status_code == wrong.error.status_code == 401
    # Logged reasons still tell the two apart
    assert (await auth_logs(migrated_db, "999"))[0]["failure_reason"] == "badge not found"
    assert (await auth_logs(migrated_db, "001"))[0]["failure_reason"] == "invalid pin"


@pytest.mark.asyncio
async def test_custom_threshold(migrated_db):
    guard = AuthenticationGuard(migrated_db, max_failed_attempts=2, bcrypt_rounds=TEST_BCRYPT_ROUNDS)

    first = await guard.authenticate("002", "0000", ORIGIN)
    second = await guard.authenticate("002", "0000", ORIGIN)

    assert isinstance(first.error, InvalidPinError)
    assert isinstance(second.error, AccountLockedError)


@pytest.mark.asyncio
async def test_concurrent_failures_all_counted(guard, migrated_db):
    """No lost updates when wrong PINs for one badge arrive together"""
    outcomes = await asyncio.gather(*[
        guard.authenticate("003", "0000", ORIGIN) for _ in range(3)
    ])

    assert all(isinstance(outcome.error, InvalidPinError) for outcome in outcomes)
    assert sorted(outcome.failed_attempts for outcome in outcomes) == [1, 2, 3]

    state = await credential_state(migrated_db, "003")
    assert state["failed_attempts"] == 3
    assert len(await auth_logs(migrated_db, "003")) == 3


@pytest.mark.asyncio
async def test_concurrent_failures_past_threshold(guard, migrated_db):
    outcomes = await asyncio.gather(*[
        guard.authenticate("004", "0000", ORIGIN) for _ in range(8)
    ])

    state = await credential_state(migrated_db, "004")
    assert state["failed_attempts"] == 5
    assert state["account_locked"] == 1
    assert len(await auth_logs(migrated_db, "004")) == 8
    assert sum(isinstance(outcome.error, InvalidPinError) for outcome in outcomes) == 4
    assert sum(isinstance(outcome.error, AccountLockedError) for outcome in outcomes) == 4


@pytest.mark.asyncio
async def test_log_failure_rolls_back_counter(guard, migrated_db):
    await migrated_db.execute("DROP TABLE auth_logs")

    with pytest.raises(StorageError):
        await guard.authenticate("001", "0000", ORIGIN)

    state = await credential_state(migrated_db, "001")
    assert state["failed_attempts"] == 0
    assert state["last_failed_attempt"] is None


@pytest.mark.asyncio
async def test_reset_pin_unlocks_account(guard, migrated_db):
    for _ in range(5):
        await guard.authenticate("002", "0000", ORIGIN)
    assert (await credential_state(migrated_db, "002"))["account_locked"] == 1

    await guard.reset_pin("002", "8642", reset_by="001", reason="Forgot PIN", origin=ORIGIN)

    state = await credential_state(migrated_db, "002")
    assert state["account_locked"] == 0
    assert state["failed_attempts"] == 0

    outcome = await guard.authenticate("002", "8642", ORIGIN)
    assert outcome.success is True
    assert (await guard.authenticate("002", "2345", ORIGIN)).success is False

    reset_log = await migrated_db.fetch_one("SELECT * FROM pin_reset_logs WHERE badge = '002'")
    assert reset_log["reset_by"] == "001"
    assert reset_log["reset_reason"] == "Forgot PIN"
    assert reset_log["reset_type"] == "admin"

    audit = await migrated_db.fetch_one("SELECT * FROM audit_log WHERE record_id = '002'")
    assert audit["action"] == "PIN_RESET"
    assert audit["user_badge"] == "001"


@pytest.mark.asyncio
@pytest.mark.parametrize("new_pin", ["12", "1234567", "12ab", ""])
async def test_reset_pin_rejects_bad_format(guard, migrated_db, new_pin):
    with pytest.raises(InvalidInputError):
        await guard.reset_pin("001", new_pin, reset_by="002")

    assert await count_rows(migrated_db, "pin_reset_logs") == 0


@pytest.mark.asyncio
async def test_reset_pin_unknown_badge(guard, migrated_db):
    with pytest.raises(RecordNotFoundError):
        await guard.reset_pin("999", "1234", reset_by="001")

    assert await count_rows(migrated_db, "pin_reset_logs") == 0
    assert await count_rows(migrated_db, "audit_log") == 0


@pytest.mark.asyncio
async def test_station_login(guard, migrated_db):
    assert await guard.authenticate_station("Station 1", "station1pass") is True
    assert await guard.authenticate_station("Station 1", "wrong") is False
    assert await guard.authenticate_station("Station 9", "station9pass") is False
    assert await guard.authenticate_station(None, None) is False

    account = await migrated_db.fetch_one(
        "SELECT last_login FROM station_accounts WHERE station_name = 'Station 1'"
    )
    assert account["last_login"] is not None
