# freightlink/modules/shipments/router.py
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session
from typing import List

from freightlink.config.database import get_db
from freightlink.core.auth.dependencies import (
    get_current_user, get_driver_user, get_business_user
)
from freightlink.shared.database.models import User
from .service import ShipmentService
from .schemas import (
    ShipmentCreate, ShipmentResponse, RequestResolution,
    PlannedLocationsUpdate, CurrentLocationUpdate, StatusUpdate
)

router = APIRouter()

@router.get("/health")
async def shipments_health():
    """Health check for the shipments module"""
    return {
        "service": "shipments",
        "status": "healthy",
        "version": "1.0.0",
        "features": [
            "Post shipments",
            "City board of pending shipments",
            "Driver requests",
            "First-accept assignment",
            "Lifecycle status tracking",
            "Live location tracking"
        ]
    }

@router.post("", response_model=ShipmentResponse, status_code=status.HTTP_201_CREATED)
async def create_shipment(
    shipment_data: ShipmentCreate,
    current_user: User = Depends(get_business_user),
    db: Session = Depends(get_db)
):
    """
    Post a new shipment

    **Required:** title, from_city, to_city, deadline, weight, volume

    The shipment starts in `pending` with no requests and no driver.
    """
    service = ShipmentService(db)
    return await service.create_shipment(current_user.id, shipment_data)

@router.get("/business", response_model=List[ShipmentResponse])
async def get_business_shipments(
    current_user: User = Depends(get_business_user),
    db: Session = Depends(get_db)
):
    """
    Shipments posted by the calling business, newest first

    Each request carries the driver's card (username, vehicle type, contact).
    A driver whose account no longer exists shows up as username `unavailable`.
    """
    service = ShipmentService(db)
    return await service.get_business_shipments(current_user.id)

@router.get("/city/{city}", response_model=List[ShipmentResponse])
async def get_city_shipments(
    city: str = Path(..., description="Origin city"),
    current_user: User = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """Pending shipments leaving the given city"""
    service = ShipmentService(db)
    return await service.get_city_shipments(city)

@router.get("/{shipment_id}", response_model=ShipmentResponse)
async def get_shipment(
    shipment_id: int = Path(..., description="Shipment ID"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Single shipment

    Visible to the owning business, the assigned driver, drivers with a
    request on it, and any driver while it is still pending.
    """
    service = ShipmentService(db)
    return await service.get_shipment(shipment_id, current_user)

@router.post("/{shipment_id}/request", response_model=ShipmentResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(
    shipment_id: int = Path(..., description="Shipment ID"),
    current_user: User = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """
    Ask to carry a shipment

    **Errors:**
    - 404 unknown shipment
    - 409 `conflict` when this driver already requested it (any status)
    - 409 `state_error` when the shipment is no longer pending
    """
    service = ShipmentService(db)
    return await service.submit_request(shipment_id, current_user.id)

@router.patch("/{shipment_id}/request/{request_id}", response_model=ShipmentResponse)
async def resolve_request(
    resolution: RequestResolution,
    shipment_id: int = Path(..., description="Shipment ID"),
    request_id: int = Path(..., description="Request ID"),
    current_user: User = Depends(get_business_user),
    db: Session = Depends(get_db)
):
    """
    Accept or reject a driver request

    **Accepting:**
    - Shipment becomes `active` and the request's driver is assigned
    - Every other request on the shipment becomes `rejected`

    A request can only be resolved once; a second attempt returns 409.
    """
    service = ShipmentService(db)
    return await service.resolve_request(shipment_id, request_id, resolution.status, current_user.id)

@router.patch("/{shipment_id}/locations", response_model=ShipmentResponse)
async def set_planned_locations(
    locations: PlannedLocationsUpdate,
    shipment_id: int = Path(..., description="Shipment ID"),
    current_user: User = Depends(get_business_user),
    db: Session = Depends(get_db)
):
    """Set pickup and/or dropoff points; omitted points are left unchanged"""
    service = ShipmentService(db)
    return await service.set_planned_locations(shipment_id, locations, current_user.id)

@router.patch("/{shipment_id}/current-location", response_model=ShipmentResponse)
async def report_current_location(
    update: CurrentLocationUpdate,
    shipment_id: int = Path(..., description="Shipment ID"),
    current_user: User = Depends(get_driver_user),
    db: Session = Depends(get_db)
):
    """Live position from the assigned driver"""
    service = ShipmentService(db)
    return await service.report_current_location(shipment_id, update.location, current_user.id)

@router.patch("/{shipment_id}/status", response_model=ShipmentResponse)
async def update_status(
    update: StatusUpdate,
    shipment_id: int = Path(..., description="Shipment ID"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Advance the shipment status

    **Flow:** pending → active → picked_up → in_transit → delivered,
    with `cancelled` reachable from any open state. Steps may be skipped
    but never reversed. `active` is only reached by accepting a request.

    An optional `location` (assigned driver only) is recorded as the current position in the
    same write.
    """
    service = ShipmentService(db)
    return await service.update_status(shipment_id, update, current_user)
