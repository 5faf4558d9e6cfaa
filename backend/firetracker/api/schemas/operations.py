from pydantic import BaseModel, Field
from typing import Optional


class IncidentCreate(BaseModel):
    """Schema for opening an incident"""
    id: str = Field(..., min_length=1, description="Incident number, e.g. INC-2024-0001")
    location: str = Field(..., min_length=1)
    incident_type: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: Optional[str] = Field(None, description="Low, Medium, High or Critical")
    created_by: Optional[str] = None


class IncidentAttendeeCreate(BaseModel):
    badge: str
    role: Optional[str] = None
    apparatus: Optional[str] = None


class EventCreate(BaseModel):
    """Schema for scheduling a training event or other activity"""
    event_name: str = Field(..., min_length=1)
    event_type: str = Field(..., min_length=1)
    start_date: str
    end_date: Optional[str] = None
    activity_category: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    instructor: Optional[str] = None
    max_attendees: Optional[int] = Field(None, ge=1)
    created_by_badge: Optional[str] = None


class EventAttendeeCreate(BaseModel):
    badge: str
    attendance_type: Optional[str] = None
    hours_worked: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class ApparatusCreate(BaseModel):
    apparatus_name: str = Field(..., min_length=1)
    apparatus_type: str = Field(..., min_length=1, description="Engine, Ladder, Rescue, ...")
    station: Optional[str] = None
    status: Optional[str] = None
    year: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
