# freightlink/modules/shipments/service.py
from typing import Dict, Any, List, Optional
from datetime import datetime
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
import logging

from freightlink.core.auth.dependencies import AuthorizationError
from freightlink.core.exceptions import (
    ShipmentValidationError, ShipmentNotFoundError, RequestNotFoundError,
    RequestConflictError, ShipmentStateError
)
from freightlink.shared.database.models import Shipment, User
from freightlink.shared.schemas.common import GeoPoint
from .lifecycle import ASSIGNED_STATUSES, ensure_transition, is_terminal
from .repository import ShipmentRepository
from .schemas import (
    ShipmentCreate, ShipmentStatus, RequestStatus,
    PlannedLocationsUpdate, StatusUpdate
)

logger = logging.getLogger(__name__)


class ShipmentService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ShipmentRepository(db)

    # ==================== HELPERS ====================

    def _load_for_update(self, shipment_id: int) -> Shipment:
        shipment = self.repository.get_shipment_for_update(shipment_id)
        if shipment is None:
            raise ShipmentNotFoundError(shipment_id)
        return shipment

    def _commit(self, shipment_id: int, action: str) -> None:
        """Commit a shipment write, mapping database failures to API errors"""
        try:
            self.repository.save()
        except StaleDataError:
            logger.warning(f"🔁 Concurrent write on shipment {shipment_id} during {action}")
            raise RequestConflictError(
                f"Shipment {shipment_id} was modified concurrently; retry the operation"
            )
        except IntegrityError:
            logger.warning(f"🔁 Integrity conflict on shipment {shipment_id} during {action}")
            raise RequestConflictError(
                f"Conflicting write on shipment {shipment_id}; retry the operation"
            )
        except SQLAlchemyError as e:
            logger.exception(f"❌ Database error on shipment {shipment_id} during {action}")
            raise HTTPException(status_code=500, detail=f"Error during {action}: {str(e)}")

    def _view(self, shipment_id: int, include_request_drivers: bool = True) -> Dict[str, Any]:
        shipment = self.repository.get_shipment(shipment_id)
        if shipment is None:
            raise ShipmentNotFoundError(shipment_id)
        return self.repository.to_dict(shipment, include_request_drivers)

    @staticmethod
    def _ensure_owner(shipment: Shipment, business_id: int) -> None:
        if shipment.business_id != business_id:
            raise AuthorizationError(f"Shipment {shipment.id} belongs to another business")

    @staticmethod
    def _ensure_assigned_driver(shipment: Shipment, driver_id: int) -> None:
        if shipment.driver_id is None:
            raise ShipmentStateError(f"Shipment {shipment.id} has no assigned driver")
        if shipment.driver_id != driver_id:
            raise AuthorizationError(f"Shipment {shipment.id} is assigned to another driver")

    @staticmethod
    def _apply_current_location(shipment: Shipment, location: GeoPoint) -> None:
        shipment.current_lat = location.lat
        shipment.current_lng = location.lng
        shipment.last_location_update = datetime.now()

    # ==================== SHIPMENT STORE ====================

    async def create_shipment(self, business_id: int, data: ShipmentCreate) -> Dict[str, Any]:
        """Post a new shipment in pending state"""
        try:
            shipment = self.repository.create_shipment(business_id, data.model_dump())
        except SQLAlchemyError as e:
            logger.exception("❌ Error creating shipment")
            raise HTTPException(status_code=500, detail=f"Error creating shipment: {str(e)}")

        logger.info(
            f"📦 Shipment {shipment.id} posted by business {business_id}: "
            f"{shipment.from_city} → {shipment.to_city}"
        )
        return self._view(shipment.id)

    async def get_business_shipments(self, business_id: int) -> List[Dict[str, Any]]:
        """All shipments of a business, newest first, with driver cards"""
        shipments = self.repository.get_by_business(business_id)
        return [self.repository.to_dict(s) for s in shipments]

    async def get_driver_shipments(self, driver_id: int) -> List[Dict[str, Any]]:
        """Shipments assigned to a driver"""
        shipments = self.repository.get_by_driver(driver_id)
        return [self.repository.to_dict(s, include_request_drivers=False) for s in shipments]

    async def get_city_shipments(self, city: str) -> List[Dict[str, Any]]:
        """Pending shipments leaving a city"""
        shipments = self.repository.get_pending_by_city(city)
        return [self.repository.to_dict(s, include_request_drivers=False) for s in shipments]

    async def get_shipment(self, shipment_id: int, current_user: User) -> Dict[str, Any]:
        shipment = self.repository.get_shipment(shipment_id)
        if shipment is None:
            raise ShipmentNotFoundError(shipment_id)

        if current_user.is_business:
            self._ensure_owner(shipment, current_user.id)
            return self.repository.to_dict(shipment)

        visible = (
            shipment.driver_id == current_user.id
            or shipment.status == ShipmentStatus.PENDING.value
            or self.repository.find_driver_request(shipment, current_user.id) is not None
        )
        if not visible:
            raise AuthorizationError(f"Shipment {shipment_id} is not visible to this driver")
        return self.repository.to_dict(shipment, include_request_drivers=False)

    # ==================== REQUESTS ====================

    async def submit_request(self, shipment_id: int, driver_id: int) -> Dict[str, Any]:
        """Append a pending request from a driver"""
        try:
            shipment = self._load_for_update(shipment_id)

            if self.repository.find_driver_request(shipment, driver_id) is not None:
                raise RequestConflictError(
                    f"Driver {driver_id} already has a request on shipment {shipment_id}"
                )

            if shipment.status != ShipmentStatus.PENDING.value:
                raise ShipmentStateError(
                    f"Shipment {shipment_id} is {shipment.status} and no longer takes requests"
                )

            self.repository.add_request(shipment, driver_id)
            self._commit(shipment_id, "submit_request")
        except HTTPException:
            self.db.rollback()
            raise

        logger.info(f"🙋 Driver {driver_id} requested shipment {shipment_id}")
        return self._view(shipment_id)

    async def resolve_request(
        self,
        shipment_id: int,
        request_id: int,
        decision: str,
        business_id: int
    ) -> Dict[str, Any]:
        """Accept or reject a driver request; accepting assigns the driver and rejects all siblings"""
        decision = RequestStatus(decision)
        if decision == RequestStatus.PENDING:
            raise ShipmentValidationError("Decision must be 'accepted' or 'rejected'")

        try:
            shipment = self._load_for_update(shipment_id)
            self._ensure_owner(shipment, business_id)

            request = self.repository.find_request(shipment, request_id)
            if request is None:
                raise RequestNotFoundError(shipment_id, request_id)

            if request.status != RequestStatus.PENDING.value:
                raise RequestConflictError(
                    f"Request {request_id} was already {request.status}"
                )

            if decision == RequestStatus.ACCEPTED:
                if shipment.driver_id is not None:
                    raise RequestConflictError(
                        f"Shipment {shipment_id} already has driver {shipment.driver_id} assigned"
                    )
                if shipment.status != ShipmentStatus.PENDING.value:
                    raise ShipmentStateError(
                        f"Shipment {shipment_id} is {shipment.status}; requests can no longer be accepted"
                    )

                request.status = RequestStatus.ACCEPTED.value
                shipment.status = ShipmentStatus.ACTIVE.value
                shipment.driver_id = request.driver_id

                # Every sibling loses, whatever its current status
                for other in shipment.requests:
                    if other.id != request.id:
                        other.status = RequestStatus.REJECTED.value
            else:
                request.status = RequestStatus.REJECTED.value

            self.repository.touch(shipment)
            self._commit(shipment_id, "resolve_request")
        except HTTPException:
            self.db.rollback()
            raise

        if decision == RequestStatus.ACCEPTED:
            logger.info(f"✅ Shipment {shipment_id} assigned to driver {request.driver_id} (request {request_id})")
        else:
            logger.info(f"🚫 Request {request_id} on shipment {shipment_id} rejected")

        return self._view(shipment_id)

    # ==================== LOCATION TRACKING ====================

    async def set_planned_locations(
        self,
        shipment_id: int,
        data: PlannedLocationsUpdate,
        business_id: int
    ) -> Dict[str, Any]:
        """Partial update of pickup/dropoff points"""
        if data.pickup_location is None and data.dropoff_location is None:
            raise ShipmentValidationError("Provide pickup_location, dropoff_location or both")

        try:
            shipment = self._load_for_update(shipment_id)
            self._ensure_owner(shipment, business_id)

            if data.pickup_location is not None:
                shipment.pickup_lat = data.pickup_location.lat
                shipment.pickup_lng = data.pickup_location.lng
            if data.dropoff_location is not None:
                shipment.dropoff_lat = data.dropoff_location.lat
                shipment.dropoff_lng = data.dropoff_location.lng

            self.repository.touch(shipment)
            self._commit(shipment_id, "set_planned_locations")
        except HTTPException:
            self.db.rollback()
            raise

        logger.info(f"🗺️ Planned locations updated for shipment {shipment_id}")
        return self._view(shipment_id)

    async def report_current_location(
        self,
        shipment_id: int,
        location: GeoPoint,
        driver_id: int
    ) -> Dict[str, Any]:
        """Driver position push"""
        try:
            shipment = self._load_for_update(shipment_id)
            self._ensure_assigned_driver(shipment, driver_id)

            if is_terminal(shipment.status):
                raise ShipmentStateError(
                    f"Shipment {shipment_id} is {shipment.status}; location tracking has ended"
                )

            self._apply_current_location(shipment, location)
            self.repository.touch(shipment)
            self._commit(shipment_id, "report_current_location")
        except HTTPException:
            self.db.rollback()
            raise

        logger.debug(f"📍 Shipment {shipment_id} at ({location.lat}, {location.lng})")
        return self._view(shipment_id, include_request_drivers=False)

    async def update_status(
        self,
        shipment_id: int,
        data: StatusUpdate,
        current_user: User
    ) -> Dict[str, Any]:
        """Move the shipment along its lifecycle, optionally with a position fix"""
        target = ShipmentStatus(data.status)

        try:
            shipment = self._load_for_update(shipment_id)

            if current_user.is_business:
                self._ensure_owner(shipment, current_user.id)
                # Position fixes come only from the assigned driver
                if data.location is not None:
                    raise AuthorizationError("Only the assigned driver can report a location")
            else:
                self._ensure_assigned_driver(shipment, current_user.id)

            previous = shipment.status
            ensure_transition(previous, target)

            if target in ASSIGNED_STATUSES and shipment.driver_id is None:
                raise ShipmentStateError(
                    f"Shipment {shipment_id} cannot be {target.value} without an assigned driver"
                )

            shipment.status = target.value
            if data.location is not None:
                self._apply_current_location(shipment, data.location)

            self.repository.touch(shipment)
            self._commit(shipment_id, "update_status")
        except HTTPException:
            self.db.rollback()
            raise

        logger.info(f"🚚 Shipment {shipment_id}: {previous} → {target.value} (by {current_user.role} {current_user.id})")
        return self._view(shipment_id, include_request_drivers=current_user.is_business)
