from pydantic import BaseModel, Field
from typing import Literal, Optional

class UserLogin(BaseModel):
    """Login with username (or email) and password"""
    username: str = Field(..., description="Username or email")
    password: str = Field(..., min_length=6, description="Password")

    class Config:
        json_schema_extra = {
            "example": {
                "username": "driver_ravi",
                "password": "driver123"
            }
        }

class UserRegister(BaseModel):
    """Register a driver or business account"""
    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    role: Literal["driver", "business"]
    contact_number: Optional[str] = None
    address: Optional[str] = None

    # Driver
    vehicle_type: Optional[str] = None
    vehicle_capacity: Optional[str] = None
    license_number: Optional[str] = None

    # Business
    business_name: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "username": "acme_steel",
                "email": "ops@acmesteel.in",
                "password": "business123",
                "role": "business",
                "business_name": "Acme Steel",
                "contact_number": "+91 98200 00000"
            }
        }

class UserResponse(BaseModel):
    """Public view of an account"""
    id: int
    username: str
    email: str
    role: str
    is_active: bool
    contact_number: Optional[str] = None
    address: Optional[str] = None
    profile_picture: Optional[str] = None
    vehicle_type: Optional[str] = None
    vehicle_capacity: Optional[str] = None
    license_number: Optional[str] = None
    business_name: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None

    class Config:
        from_attributes = True

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
