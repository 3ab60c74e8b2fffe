# freightlink/modules/shipments/lifecycle.py
"""
Shipment status graph

    pending -> active -> picked_up -> in_transit -> delivered
       \\          \\           \\            \\
        +----------+-----------+------------+--> cancelled

Progress is forward-only and intermediate steps may be skipped. ``active`` is
only entered by accepting a driver request, never by a direct status write.
``delivered`` and ``cancelled`` are terminal.
"""

from typing import Dict, FrozenSet

from freightlink.core.exceptions import ShipmentStateError
from .schemas import ShipmentStatus

ASSIGNED_STATUSES: FrozenSet[ShipmentStatus] = frozenset({
    ShipmentStatus.ACTIVE,
    ShipmentStatus.PICKED_UP,
    ShipmentStatus.IN_TRANSIT,
    ShipmentStatus.DELIVERED,
})

TERMINAL_STATUSES: FrozenSet[ShipmentStatus] = frozenset({
    ShipmentStatus.DELIVERED,
    ShipmentStatus.CANCELLED,
})

ALLOWED_TRANSITIONS: Dict[ShipmentStatus, FrozenSet[ShipmentStatus]] = {
    ShipmentStatus.PENDING: frozenset({ShipmentStatus.CANCELLED}),
    ShipmentStatus.ACTIVE: frozenset({
        ShipmentStatus.PICKED_UP,
        ShipmentStatus.IN_TRANSIT,
        ShipmentStatus.DELIVERED,
        ShipmentStatus.CANCELLED,
    }),
    ShipmentStatus.PICKED_UP: frozenset({
        ShipmentStatus.IN_TRANSIT,
        ShipmentStatus.DELIVERED,
        ShipmentStatus.CANCELLED,
    }),
    ShipmentStatus.IN_TRANSIT: frozenset({
        ShipmentStatus.DELIVERED,
        ShipmentStatus.CANCELLED,
    }),
    ShipmentStatus.DELIVERED: frozenset(),
    ShipmentStatus.CANCELLED: frozenset(),
}


def is_terminal(status: ShipmentStatus) -> bool:
    return ShipmentStatus(status) in TERMINAL_STATUSES


def can_transition(current: ShipmentStatus, target: ShipmentStatus) -> bool:
    """True when a status write from ``current`` to ``target`` is legal.

    Re-writing the current status is allowed while the shipment is still
    open, so a driver can push a location without changing the status.
    """
    current = ShipmentStatus(current)
    target = ShipmentStatus(target)
    if current == target:
        return not is_terminal(current)
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: ShipmentStatus, target: ShipmentStatus) -> None:
    """Raise ShipmentStateError for an illegal status write"""
    if not can_transition(current, target):
        current_value = ShipmentStatus(current).value
        target_value = ShipmentStatus(target).value
        if is_terminal(current):
            raise ShipmentStateError(
                f"Shipment is already {current_value}; status can no longer change"
            )
        raise ShipmentStateError(
            f"Illegal status transition {current_value} -> {target_value}"
        )
