# freightlink/shared/schemas/common.py
from pydantic import BaseModel, Field
from typing import Any, Optional
from datetime import datetime

class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class ErrorResponse(BaseResponse):
    success: bool = False
    error_code: Optional[str] = None
    detail: Optional[Any] = None

class GeoPoint(BaseModel):
    """Latitude/longitude pair"""
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")

    class Config:
        json_schema_extra = {
            "example": {"lat": 18.5204, "lng": 73.8567}
        }

class DriverInfo(BaseModel):
    id: Optional[int] = None
    username: str
    vehicle_type: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None

class BusinessInfo(BaseModel):
    id: Optional[int] = None
    business_name: Optional[str] = None
    contact_number: Optional[str] = None

