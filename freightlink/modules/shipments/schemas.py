# freightlink/modules/shipments/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import date, datetime
from enum import Enum

from freightlink.shared.schemas.common import GeoPoint, DriverInfo, BusinessInfo


class ShipmentStatus(str, Enum):
    """Shipment lifecycle states"""
    PENDING = "pending"
    ACTIVE = "active"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class RequestStatus(str, Enum):
    """Driver request states"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# Older clients send the simplified pending/active/completed vocabulary
LEGACY_STATUS_ALIASES = {"completed": ShipmentStatus.DELIVERED.value}


# ==================== REQUEST BODIES ====================

class ShipmentCreate(BaseModel):
    title: str = Field(..., max_length=255, description="Short description of the load")
    from_city: str = Field(..., max_length=120, description="Origin city")
    to_city: str = Field(..., max_length=120, description="Destination city")
    description: Optional[str] = Field(None, description="Free-text details")
    weight: float = Field(..., gt=0, description="Weight in kg")
    volume: str = Field(..., max_length=100, description="Dimensions, e.g. 2x2x2")
    cost: float = Field(0, ge=0, description="Offered price")
    deadline: date = Field(..., description="Delivery deadline")
    pickup_location: Optional[GeoPoint] = None
    dropoff_location: Optional[GeoPoint] = None

    @field_validator('title', 'from_city', 'to_city', 'volume')
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Steel Coils",
                "from_city": "Pune",
                "to_city": "Mumbai",
                "weight": 500,
                "volume": "2x2x2",
                "cost": 12000,
                "deadline": "2025-06-01"
            }
        }


class RequestResolution(BaseModel):
    status: Literal["accepted", "rejected"] = Field(..., description="Business decision")


class PlannedLocationsUpdate(BaseModel):
    pickup_location: Optional[GeoPoint] = None
    dropoff_location: Optional[GeoPoint] = None


class CurrentLocationUpdate(BaseModel):
    location: GeoPoint


class StatusUpdate(BaseModel):
    status: ShipmentStatus
    location: Optional[GeoPoint] = None

    @field_validator('status', mode='before')
    @classmethod
    def normalize_legacy_status(cls, v):
        if isinstance(v, str):
            return LEGACY_STATUS_ALIASES.get(v, v)
        return v


# ==================== RESPONSES ====================

class RequestResponse(BaseModel):
    id: int
    driver_id: int
    status: RequestStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    driver: Optional[DriverInfo] = None


class ShipmentResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    from_city: str
    to_city: str
    weight: float
    volume: str
    cost: float
    deadline: date
    status: ShipmentStatus
    business_id: int
    driver_id: Optional[int] = None
    requests: List[RequestResponse] = []
    pickup_location: Optional[GeoPoint] = None
    dropoff_location: Optional[GeoPoint] = None
    current_location: Optional[GeoPoint] = None
    last_location_update: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    driver: Optional[DriverInfo] = None
    business: Optional[BusinessInfo] = None
