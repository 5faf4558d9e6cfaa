import re
from functools import lru_cache

import bcrypt


def hash_secret(secret: str, rounds: int = 12) -> str:
    """Hash a PIN or password using bcrypt"""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(secret.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_secret(secret: str, hashed: str) -> bool:
    """Verify a PIN or password against its hash"""
    if not secret or not hashed:
        return False
    try:
        return bcrypt.checkpw(secret.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        # Malformed stored hash, or input longer than bcrypt accepts
        return False


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    return hash_secret("not-a-real-pin", rounds)


def burn_verification(secret: str, rounds: int = 12) -> None:
    """Spend one hash comparison at the given cost without a stored credential.

    Used for unknown badges so the response takes as long as a wrong PIN.
    """
    verify_secret(secret or "0000", _dummy_hash(rounds))


def is_valid_pin(pin: str, min_length: int = 4, max_length: int = 6) -> bool:
    """PINs are all digits, between min_length and max_length long"""
    if not pin:
        return False
    return re.fullmatch(rf"\d{{{min_length},{max_length}}}", pin) is not None
