# freightlink/modules/profiles/__init__.py
"""
Profiles module - driver and business account data

- GET/PATCH /driver/profile, GET /driver/shipments
- GET/PATCH /business/profile
"""

from .router import driver_router, business_router
from .service import ProfileService
from .repository import ProfileRepository

__all__ = [
    "driver_router",
    "business_router",
    "ProfileService",
    "ProfileRepository"
]
