# freightlink/modules/shipments/__init__.py
"""
Shipments module - request/assignment lifecycle

- Post shipments and list them per business, per driver and per origin city
- Driver requests, first-accept assignment with sibling rejection
- Lifecycle status graph (lifecycle.py)
- Planned and live locations

Architecture:
- router.py: endpoints
- service.py: business rules and transactions
- repository.py: data access and display mapping
- schemas.py: request/response models
- lifecycle.py: status transition table
"""

from .router import router
from .service import ShipmentService
from .repository import ShipmentRepository

__all__ = [
    "router",
    "ShipmentService",
    "ShipmentRepository"
]
