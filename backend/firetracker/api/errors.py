from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from firetracker.core.exceptions import FireTrackerError, StorageError

logger = logging.getLogger(__name__)


def error_response(request: Request, status_code: int, message: str, **extra) -> JSONResponse:
    content = {
        "success": False,
        "error": message,
        "status_code": status_code,
        "path": str(request.url.path)
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with structured error response"""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail} - {request.url}")
    return error_response(request, exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed error information"""
    logger.warning(f"Validation error: {exc.errors()} - {request.url}")
    return error_response(request, 422, "Validation error", errors=exc.errors())


async def storage_exception_handler(request: Request, exc: StorageError):
    """Storage failures never leak driver details to the client"""
    logger.error(f"Storage error: {exc} - {request.url}", exc_info=exc)
    return error_response(request, 500, "Internal server error")


async def tracker_exception_handler(request: Request, exc: FireTrackerError):
    """Map domain errors to their HTTP status"""
    status_code = getattr(exc, "status_code", 500)
    message = getattr(exc, "message", None) or str(exc)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__}: {message} - {request.url}", exc_info=exc)
        message = "Internal server error"
    else:
        logger.info(f"{type(exc).__name__} ({status_code}): {message} - {request.url}")
    return error_response(request, status_code, message)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(f"Unexpected error: {str(exc)} - {request.url}", exc_info=True)
    return error_response(request, 500, "Internal server error")
