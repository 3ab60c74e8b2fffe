# freightlink/modules/profiles/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from freightlink.config.database import get_db
from freightlink.core.auth.dependencies import get_driver_user, get_business_user
from freightlink.core.auth.schemas import UserResponse
from freightlink.shared.database.models import User
from freightlink.modules.shipments.service import ShipmentService
from freightlink.modules.shipments.schemas import ShipmentResponse
from .service import ProfileService
from .schemas import DriverProfileUpdate, BusinessProfileUpdate

driver_router = APIRouter()
business_router = APIRouter()

# ==================== DRIVER ====================

@driver_router.get("/profile", response_model=UserResponse)
async def get_driver_profile(
    current_user: User = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """Profile of the calling driver"""
    service = ProfileService(db)
    return await service.get_profile(current_user.id, "driver")

@driver_router.patch("/profile", response_model=UserResponse)
async def update_driver_profile(
    updates: DriverProfileUpdate,
    current_user: User = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """Update the calling driver's profile; password and role are not editable here"""
    service = ProfileService(db)
    return await service.update_profile(current_user.id, "driver", updates)

@driver_router.get("/shipments", response_model=List[ShipmentResponse])
async def get_driver_shipments(
    current_user: User = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """Shipments assigned to the calling driver"""
    service = ShipmentService(db)
    return await service.get_driver_shipments(current_user.id)

# ==================== BUSINESS ====================

@business_router.get("/profile", response_model=UserResponse)
async def get_business_profile(
    current_user: User = Depends(get_business_user),
    db: Session = Depends(get_db)
):
    """Profile of the calling business"""
    service = ProfileService(db)
    return await service.get_profile(current_user.id, "business")

@business_router.patch("/profile", response_model=UserResponse)
async def update_business_profile(
    updates: BusinessProfileUpdate,
    current_user: User = Depends(get_business_user),
    db: Session = Depends(get_db)
):
    """Update the calling business's profile; password and role are not editable here"""
    service = ProfileService(db)
    return await service.update_profile(current_user.id, "business", updates)
