# freightlink/modules/shipments/repository.py
from sqlalchemy.orm import Session, selectinload, joinedload
from sqlalchemy import and_, desc
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Dict, Any, Optional
from datetime import datetime

from freightlink.shared.database.models import Shipment, ShipmentRequest, User
import logging

logger = logging.getLogger(__name__)

# Display sentinel for a driver reference whose user record is gone
UNAVAILABLE_USERNAME = "unavailable"


def _point(lat: Optional[float], lng: Optional[float]) -> Optional[Dict[str, float]]:
    if lat is None or lng is None:
        return None
    return {"lat": lat, "lng": lng}


def driver_display(driver: Optional[User], driver_id: Optional[int]) -> Dict[str, Any]:
    """Driver card shown to businesses, or a placeholder when the record is missing"""
    if driver is None:
        return {
            "id": driver_id,
            "username": UNAVAILABLE_USERNAME,
            "vehicle_type": "unknown",
            "contact_number": "not available",
            "email": None
        }
    return {
        "id": driver.id,
        "username": driver.username,
        "vehicle_type": driver.vehicle_type,
        "contact_number": driver.contact_number,
        "email": driver.email
    }


def business_display(business: Optional[User]) -> Optional[Dict[str, Any]]:
    if business is None:
        return None
    return {
        "id": business.id,
        "business_name": business.business_name or business.username,
        "contact_number": business.contact_number
    }


class ShipmentRepository:
    def __init__(self, db: Session):
        self.db = db

    # ==================== READS ====================

    def _base_query(self):
        return self.db.query(Shipment).options(
            selectinload(Shipment.requests).joinedload(ShipmentRequest.driver),
            joinedload(Shipment.driver),
            joinedload(Shipment.business)
        )

    def get_shipment(self, shipment_id: int) -> Optional[Shipment]:
        return self._base_query().filter(Shipment.id == shipment_id).first()

    def get_shipment_for_update(self, shipment_id: int) -> Optional[Shipment]:
        """Load a shipment with its row locked for the rest of the transaction"""
        return (
            self.db.query(Shipment)
            .filter(Shipment.id == shipment_id)
            .populate_existing()
            .with_for_update()
            .first()
        )

    def get_by_business(self, business_id: int) -> List[Shipment]:
        return (
            self._base_query()
            .filter(Shipment.business_id == business_id)
            .order_by(desc(Shipment.created_at), desc(Shipment.id))
            .all()
        )

    def get_by_driver(self, driver_id: int) -> List[Shipment]:
        return (
            self._base_query()
            .filter(Shipment.driver_id == driver_id)
            .order_by(desc(Shipment.created_at), desc(Shipment.id))
            .all()
        )

    def get_pending_by_city(self, city: str) -> List[Shipment]:
        return (
            self._base_query()
            .filter(
                and_(
                    Shipment.from_city == city,
                    Shipment.status == 'pending'
                )
            )
            .order_by(desc(Shipment.created_at), desc(Shipment.id))
            .all()
        )

    @staticmethod
    def find_request(shipment: Shipment, request_id: int) -> Optional[ShipmentRequest]:
        return next((r for r in shipment.requests if r.id == request_id), None)

    @staticmethod
    def find_driver_request(shipment: Shipment, driver_id: int) -> Optional[ShipmentRequest]:
        return next((r for r in shipment.requests if r.driver_id == driver_id), None)

    # ==================== WRITES ====================

    def create_shipment(self, business_id: int, fields: Dict[str, Any]) -> Shipment:
        pickup = fields.pop("pickup_location", None)
        dropoff = fields.pop("dropoff_location", None)

        shipment = Shipment(
            **fields,
            business_id=business_id,
            status='pending'
        )
        if pickup:
            shipment.pickup_lat, shipment.pickup_lng = pickup["lat"], pickup["lng"]
        if dropoff:
            shipment.dropoff_lat, shipment.dropoff_lng = dropoff["lat"], dropoff["lng"]

        self.db.add(shipment)
        self.save()
        self.db.refresh(shipment)
        return shipment

    def add_request(self, shipment: Shipment, driver_id: int) -> ShipmentRequest:
        request = ShipmentRequest(driver_id=driver_id, status='pending')
        shipment.requests.append(request)
        self.touch(shipment)
        return request

    @staticmethod
    def touch(shipment: Shipment) -> None:
        """Mark the parent row dirty so updated_at and version move with any child change"""
        shipment.updated_at = datetime.now()

    def save(self) -> None:
        """Commit the current unit of work, rolling back on any database error"""
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # ==================== SERIALIZATION ====================

    def to_dict(self, shipment: Shipment, include_request_drivers: bool = True) -> Dict[str, Any]:
        requests = []
        for request in shipment.requests:
            item = {
                'id': request.id,
                'driver_id': request.driver_id,
                'status': request.status,
                'created_at': request.created_at,
                'updated_at': request.updated_at,
                'driver': None
            }
            if include_request_drivers:
                item['driver'] = driver_display(request.driver, request.driver_id)
            requests.append(item)

        driver = None
        if shipment.driver_id is not None or shipment.status in ('active', 'picked_up', 'in_transit', 'delivered'):
            driver = driver_display(shipment.driver, shipment.driver_id)

        return {
            'id': shipment.id,
            'title': shipment.title,
            'description': shipment.description,
            'from_city': shipment.from_city,
            'to_city': shipment.to_city,
            'weight': shipment.weight,
            'volume': shipment.volume,
            'cost': float(shipment.cost or 0),
            'deadline': shipment.deadline,
            'status': shipment.status,
            'business_id': shipment.business_id,
            'driver_id': shipment.driver_id,
            'requests': requests,
            'pickup_location': _point(shipment.pickup_lat, shipment.pickup_lng),
            'dropoff_location': _point(shipment.dropoff_lat, shipment.dropoff_lng),
            'current_location': _point(shipment.current_lat, shipment.current_lng),
            'last_location_update': shipment.last_location_update,
            'created_at': shipment.created_at,
            'updated_at': shipment.updated_at,
            'driver': driver,
            'business': business_display(shipment.business)
        }
