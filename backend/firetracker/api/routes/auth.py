from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from firetracker.api.dependencies import get_auth_guard, request_origin
from firetracker.api.schemas import (
    AuthenticateRequest,
    AuthenticateResponse,
    ErrorResponse,
    StationLoginRequest,
    StationLoginResponse
)
from firetracker.core.rate_limiter import auth_rate_limit, limiter
from firetracker.services.auth_service import AuthenticationGuard

router = APIRouter(tags=["authentication"])


async def read_credentials(request: Request) -> AuthenticateRequest:
    """
    Parse the authenticate body without rejecting it.

    Bodies that are not a JSON object, and fields that are not strings, come
    through as missing so the guard still answers and logs the attempt.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        body = {}

    return AuthenticateRequest.model_validate(
        {key: value for key, value in body.items() if isinstance(value, str)}
    )


@router.post(
    "/firefighters/authenticate",
    response_model=AuthenticateResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 423: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": AuthenticateRequest.model_json_schema()}}
        }
    }
)
@limiter.limit(auth_rate_limit)
async def authenticate(
    request: Request,
    guard: AuthenticationGuard = Depends(get_auth_guard)
):
    """Authenticate a firefighter by badge and PIN"""
    credentials = await read_credentials(request)
    outcome = await guard.authenticate(credentials.badge, credentials.pin, request_origin(request))

    if not outcome.success:
        return JSONResponse(
            status_code=outcome.error.status_code,
            content={"success": False, "error": outcome.error.message}
        )

    return AuthenticateResponse(record=outcome.record)


@router.post(
    "/station/login",
    response_model=StationLoginResponse,
    responses={401: {"model": ErrorResponse}}
)
async def station_login(
    credentials: StationLoginRequest,
    guard: AuthenticationGuard = Depends(get_auth_guard)
):
    """Log in with a shared station account"""
    if not await guard.authenticate_station(credentials.station_name, credentials.password):
        return JSONResponse(
            status_code=401,
            content={"success": False, "error": "Invalid station credentials"}
        )

    return StationLoginResponse(station_name=credentials.station_name)
