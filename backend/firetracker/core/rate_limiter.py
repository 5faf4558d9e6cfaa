"""
Rate limiting.

Uses slowapi with in-process storage, keyed by client address. Every route
gets the general limit through SlowAPIMiddleware; the authentication endpoint
carries its own tighter limit instead. Limit strings and the on/off switch
come from settings when the app is created.
"""
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .config import Settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."
AUTH_RATE_LIMIT_MESSAGE = "Too many authentication attempts, please try again later."

_default_limit = "100/15 minutes"
_auth_limit = "5/15 minutes"


def default_rate_limit() -> str:
    """Current limit for requests per client address on any route"""
    return _default_limit


def auth_rate_limit() -> str:
    """Current limit for authentication attempts per client address"""
    return _auth_limit


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[default_rate_limit],
    strategy="fixed-window"
)


def configure_rate_limiting(settings: Settings):
    """Apply settings to the shared limiter and start from empty counters"""
    global _default_limit, _auth_limit
    _default_limit = settings.RATE_LIMIT_DEFAULT
    _auth_limit = settings.AUTH_RATE_LIMIT
    limiter.enabled = settings.RATE_LIMIT_ENABLED
    limiter.reset()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Answer 429 once a client exhausts its allowance.

    Kept synchronous; SlowAPIMiddleware skips coroutine handlers.
    """
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}: {exc.detail}")

    message = RATE_LIMIT_MESSAGE
    if request.url.path.endswith("/firefighters/authenticate"):
        message = AUTH_RATE_LIMIT_MESSAGE

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": message
        }
    )
