# freightlink/modules/profiles/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional


class ProfileUpdate(BaseModel):
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    contact_number: Optional[str] = None
    address: Optional[str] = None
    profile_picture: Optional[str] = None

    @field_validator('email')
    @classmethod
    def email_not_null(cls, v):
        # Runs only for an explicit value; omitting email leaves it untouched
        if v is None:
            raise ValueError('email cannot be null')
        return v


class DriverProfileUpdate(ProfileUpdate):
    vehicle_type: Optional[str] = None
    vehicle_capacity: Optional[str] = None
    license_number: Optional[str] = None


class BusinessProfileUpdate(ProfileUpdate):
    business_name: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
