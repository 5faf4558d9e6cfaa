from pydantic import AliasChoices, BaseModel, Field
from typing import Optional, Any, Dict


class AuthenticateRequest(BaseModel):
    """Badge and PIN login.

    Both fields are optional here so that a missing value reaches the guard,
    which answers 400 and records the attempt.
    """
    badge: Optional[str] = Field(None, description="Badge number")
    pin: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("pin", "secret"),
        description="Numeric PIN"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "badge": "001",
                "pin": "1234"
            }
        }


class AuthenticateResponse(BaseModel):
    success: bool = True
    record: Dict[str, Any]


class StationLoginRequest(BaseModel):
    station_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("station_name", "stationName")
    )
    password: Optional[str] = None


class StationLoginResponse(BaseModel):
    success: bool = True
    station_name: str
