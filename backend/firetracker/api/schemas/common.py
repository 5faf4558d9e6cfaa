from pydantic import BaseModel
from typing import Optional, Any, List


class SuccessResponse(BaseModel):
    """Standard success response"""
    success: bool = True


class CreatedResponse(SuccessResponse):
    """Response for a newly created record"""
    id: Any


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    error: str

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": "Firefighter not found"
            }
        }


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "healthy"
    message: str = "OK"
    service: str = "fire-tracker-api"
    version: str
    timestamp: str
    uptime: float
    database: str = "connected"


class SystemInfoResponse(BaseModel):
    version: str
    python_version: str
    platform: str
    architecture: str
    uptime: float
    database_version: int
    department: Optional[str] = None
    features: List[str]
