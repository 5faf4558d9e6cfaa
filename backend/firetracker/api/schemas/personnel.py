from pydantic import AliasChoices, BaseModel, Field
from typing import Optional, List


class FirefighterCreate(BaseModel):
    """Schema for creating a firefighter"""
    badge: str = Field(..., min_length=1, max_length=20, description="Badge number")
    name: str = Field(..., min_length=1, max_length=100)
    pin: str = Field(..., description="Initial numeric PIN")
    email: Optional[str] = None
    rank: Optional[str] = None
    station: Optional[str] = None
    phone: Optional[str] = None
    certifications: List[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "badge": "006",
                "name": "Alex Rivera",
                "pin": "6789",
                "rank": "Firefighter",
                "station": "Station 4"
            }
        }


class FirefighterCreatedResponse(BaseModel):
    success: bool = True
    badge: str


class PinReset(BaseModel):
    """Administrative PIN reset"""
    new_pin: str = Field(..., validation_alias=AliasChoices("new_pin", "newPin"))
    admin_badge: str = Field(..., validation_alias=AliasChoices("admin_badge", "adminBadge"))
    reason: Optional[str] = None
