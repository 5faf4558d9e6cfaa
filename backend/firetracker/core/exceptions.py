"""Exception types shared by the storage, migration and authentication layers."""
from typing import Optional


class FireTrackerError(Exception):
    """Base class for errors raised by the tracker."""


class StorageError(FireTrackerError):
    """A storage call failed; the operation did not complete."""


class MigrationStepError(FireTrackerError):
    """A schema migration step failed. Fatal at startup."""

    def __init__(self, version: int, description: str, cause: Optional[BaseException] = None):
        self.version = version
        self.description = description
        self.cause = cause
        message = f"Migration {version} ({description}) failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class AuthenticationError(FireTrackerError):
    """A rejected authentication attempt.

    ``message`` is what the caller sees, ``reason`` is what lands in the
    attempt log.
    """

    status_code: int = 401
    reason: str = ""
    default_message: str = ""

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredentialsError(AuthenticationError):
    status_code = 400
    reason = "missing credentials"
    default_message = "Badge and PIN are required"


class BadgeNotFoundError(AuthenticationError):
    status_code = 401
    reason = "badge not found"
    default_message = "Invalid badge number"


class InvalidPinError(AuthenticationError):
    status_code = 401
    reason = "invalid pin"
    default_message = "Invalid PIN"


class AccountLockedError(AuthenticationError):
    status_code = 423
    reason = "account locked"
    default_message = "Account is locked. Contact administrator."


class RecordNotFoundError(FireTrackerError):
    status_code = 404


class DuplicateRecordError(FireTrackerError):
    status_code = 409


class InvalidInputError(FireTrackerError):
    status_code = 400
