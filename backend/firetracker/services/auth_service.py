import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import aiosqlite

from ..core.config import Settings
from ..core.exceptions import (
    AccountLockedError,
    AuthenticationError,
    BadgeNotFoundError,
    InvalidInputError,
    InvalidPinError,
    MissingCredentialsError,
    RecordNotFoundError,
    StorageError,
)
from ..core.security import burn_verification, hash_secret, is_valid_pin, verify_secret
from ..db.database import Database
from ..db.repositories.audit_repository import AuditRepository
from ..db.repositories.personnel_repository import parse_certifications
from ..db.repositories.station_repository import StationRepository

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Invalid badge or PIN"
LOCKOUT_MESSAGE = "Account locked due to multiple failed attempts. Contact administrator."

SECRET_FIELDS = ("pin_hash",)


@dataclass
class RequestOrigin:
    """Where an attempt came from, for the attempt log"""
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass
class AuthOutcome:
    success: bool
    record: Optional[Dict[str, Any]] = None
    error: Optional[AuthenticationError] = None
    failed_attempts: Optional[int] = None


def strip_secrets(record: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a firefighter row that is safe to return to a client"""
    public = {key: value for key, value in record.items() if key not in SECRET_FIELDS}
    public["account_locked"] = bool(public.get("account_locked"))
    return parse_certifications(public)


class AuthenticationGuard:
    """Badge + PIN authentication with failed-attempt lockout.

    Every call to ``authenticate`` writes exactly one row to ``auth_logs``.
    Counter changes and that row commit in one transaction, and the counter
    is moved with a conditional UPDATE so concurrent attempts on one badge
    each count exactly once.
    """

    def __init__(
        self,
        db: Database,
        max_failed_attempts: int = 5,
        bcrypt_rounds: int = 12,
        generic_errors: bool = False,
        pin_min_length: int = 4,
        pin_max_length: int = 6
    ):
        self.db = db
        self.max_failed_attempts = max_failed_attempts
        self.bcrypt_rounds = bcrypt_rounds
        self.generic_errors = generic_errors
        self.pin_min_length = pin_min_length
        self.pin_max_length = pin_max_length

    @classmethod
    def from_settings(cls, db: Database, settings: Settings) -> "AuthenticationGuard":
        return cls(
            db,
            max_failed_attempts=settings.MAX_FAILED_ATTEMPTS,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
            generic_errors=settings.GENERIC_AUTH_ERRORS,
            pin_min_length=settings.PIN_MIN_LENGTH,
            pin_max_length=settings.PIN_MAX_LENGTH
        )

    async def authenticate(
        self,
        badge: Optional[str],
        pin: Optional[str],
        origin: Optional[RequestOrigin] = None
    ) -> AuthOutcome:
        """Check a badge and PIN.

        Rejections come back as an ``AuthOutcome`` carrying the error; only
        storage failures raise.
        """
        origin = origin or RequestOrigin()
        badge = badge.strip() if isinstance(badge, str) else badge

        if not badge or not pin or not pin.strip():
            return await self._reject(badge or "", MissingCredentialsError(), origin)

        try:
            record = await self.db.fetch_one(
                "SELECT * FROM firefighters WHERE badge = ?", (badge,)
            )
        except aiosqlite.Error as e:
            logger.error(f"Firefighter lookup failed for badge {badge}: {e}")
            raise StorageError("Authentication lookup failed") from e

        if record is None:
            await asyncio.to_thread(burn_verification, pin, self.bcrypt_rounds)
            return await self._reject(badge, BadgeNotFoundError(self._message(BadgeNotFoundError)), origin)

        if record.get("account_locked"):
            return await self._reject(badge, AccountLockedError(), origin)

        valid = await asyncio.to_thread(verify_secret, pin, record.get("pin_hash") or "")

        try:
            async with self.db.transaction() as connection:
                if valid:
                    outcome = await self._record_success(connection, badge, origin)
                else:
                    outcome = await self._record_failure(connection, badge, origin)
        except aiosqlite.Error as e:
            logger.error(f"Failed to record authentication attempt for badge {badge}: {e}")
            raise StorageError("Failed to record authentication attempt") from e

        if outcome.success:
            logger.info(f"Badge {badge} authenticated")
        elif isinstance(outcome.error, AccountLockedError) and outcome.failed_attempts:
            logger.warning(f"Badge {badge} locked after {outcome.failed_attempts} failed attempts")
        elif isinstance(outcome.error, AccountLockedError):
            logger.info(f"Badge {badge} was locked by a concurrent attempt")
        else:
            logger.info(f"Invalid PIN for badge {badge} ({outcome.failed_attempts}/{self.max_failed_attempts})")

        return outcome

    async def _record_success(
        self,
        connection: aiosqlite.Connection,
        badge: str,
        origin: RequestOrigin
    ) -> AuthOutcome:
        cursor = await connection.execute(
            """UPDATE firefighters
               SET failed_attempts = 0, last_failed_attempt = NULL
               WHERE badge = ? AND COALESCE(account_locked, 0) = 0""",
            (badge,)
        )
        if cursor.rowcount == 0:
            # Locked by a concurrent attempt after the lookup
            error = AccountLockedError()
            await self._log_attempt(connection, badge, False, origin, error.reason)
            return AuthOutcome(success=False, error=error)

        await self._log_attempt(connection, badge, True, origin)

        cursor = await connection.execute("SELECT * FROM firefighters WHERE badge = ?", (badge,))
        row = await cursor.fetchone()
        return AuthOutcome(success=True, record=strip_secrets(dict(row)), failed_attempts=0)

    async def _record_failure(
        self,
        connection: aiosqlite.Connection,
        badge: str,
        origin: RequestOrigin
    ) -> AuthOutcome:
        cursor = await connection.execute(
            """UPDATE firefighters
               SET failed_attempts = COALESCE(failed_attempts, 0) + 1,
                   last_failed_attempt = ?,
                   account_locked = CASE
                       WHEN COALESCE(failed_attempts, 0) + 1 >= ? THEN 1
                       ELSE 0
                   END
               WHERE badge = ? AND COALESCE(account_locked, 0) = 0
               RETURNING failed_attempts, account_locked""",
            (datetime.now(timezone.utc).isoformat(), self.max_failed_attempts, badge)
        )
        row = await cursor.fetchone()
        await cursor.close()

        if row is None:
            error = AccountLockedError()
            await self._log_attempt(connection, badge, False, origin, error.reason)
            return AuthOutcome(success=False, error=error)

        failed_attempts, locked = row[0], bool(row[1])
        await self._log_attempt(connection, badge, False, origin, InvalidPinError.reason)

        if locked:
            error: AuthenticationError = AccountLockedError(LOCKOUT_MESSAGE)
        else:
            error = InvalidPinError(self._message(InvalidPinError))
        return AuthOutcome(success=False, error=error, failed_attempts=failed_attempts)

    async def _reject(self, badge: str, error: AuthenticationError, origin: RequestOrigin) -> AuthOutcome:
        """Log a rejection that does not touch the counter"""
        try:
            async with self.db.transaction() as connection:
                await self._log_attempt(connection, badge, False, origin, error.reason)
        except aiosqlite.Error as e:
            logger.error(f"Failed to record authentication attempt for badge {badge!r}: {e}")
            raise StorageError("Failed to record authentication attempt") from e

        logger.info(f"Authentication rejected for badge {badge!r}: {error.reason}")
        return AuthOutcome(success=False, error=error)

    @staticmethod
    async def _log_attempt(
        connection: aiosqlite.Connection,
        badge: str,
        success: bool,
        origin: RequestOrigin,
        reason: Optional[str] = None
    ):
        await connection.execute(
            """INSERT INTO auth_logs (badge, success, ip_address, user_agent, failure_reason)
               VALUES (?, ?, ?, ?, ?)""",
            (badge, 1 if success else 0, origin.ip_address, origin.user_agent, reason)
        )

    def _message(self, error_type: type) -> str:
        return GENERIC_MESSAGE if self.generic_errors else error_type.default_message

    async def hash_pin(self, pin: Optional[str]) -> str:
        """Validate a new PIN and hash it at the configured cost"""
        if not is_valid_pin(pin, self.pin_min_length, self.pin_max_length):
            raise InvalidInputError(
                f"PIN must be {self.pin_min_length}-{self.pin_max_length} digits"
            )
        return await asyncio.to_thread(hash_secret, pin, self.bcrypt_rounds)

    async def reset_pin(
        self,
        badge: str,
        new_pin: str,
        reset_by: str,
        reason: Optional[str] = None,
        origin: Optional[RequestOrigin] = None
    ):
        """Set a new PIN and clear any lockout.

        The credential change, the reset log and the audit entry commit together.
        """
        origin = origin or RequestOrigin()
        pin_hash = await self.hash_pin(new_pin)
        reset_at = datetime.now(timezone.utc).isoformat()

        try:
            async with self.db.transaction() as connection:
                cursor = await connection.execute(
                    """UPDATE firefighters
                       SET pin_hash = ?, pin_reset_at = ?, pin_reset_by = ?,
                           failed_attempts = 0, account_locked = 0, last_failed_attempt = NULL,
                           updated_at = CURRENT_TIMESTAMP
                       WHERE badge = ?""",
                    (pin_hash, reset_at, reset_by, badge)
                )
                if cursor.rowcount == 0:
                    raise RecordNotFoundError("Firefighter not found")

                await connection.execute(
                    """INSERT INTO pin_reset_logs (badge, reset_by, reset_reason, reset_type)
                       VALUES (?, ?, ?, ?)""",
                    (badge, reset_by, reason or "Administrative reset", "admin")
                )
                await AuditRepository.record_with(
                    connection,
                    user_badge=reset_by,
                    action="PIN_RESET",
                    table_name="firefighters",
                    record_id=badge,
                    new_values={"pin_reset_at": reset_at, "account_locked": False},
                    ip_address=origin.ip_address,
                    user_agent=origin.user_agent
                )
        except aiosqlite.Error as e:
            logger.error(f"PIN reset failed for badge {badge}: {e}")
            raise StorageError("PIN reset failed") from e

        logger.info(f"PIN reset for badge {badge} by {reset_by}")

    async def authenticate_station(self, station_name: Optional[str], password: Optional[str]) -> bool:
        """Check a shared station login"""
        if not station_name or not password:
            return False

        stations = StationRepository(self.db)
        account = await stations.get_account(station_name)
        if account is None:
            await asyncio.to_thread(burn_verification, password, self.bcrypt_rounds)
            logger.info(f"Station login rejected for unknown station {station_name!r}")
            return False

        if not await asyncio.to_thread(verify_secret, password, account["password"]):
            logger.info(f"Station login rejected for {station_name}")
            return False

        await stations.touch_login(station_name)
        logger.info(f"Station {station_name} logged in")
        return True
