"""
Unit tests for the shipment status graph
"""
import pytest

from freightlink.core.exceptions import ShipmentStateError
from freightlink.modules.shipments.lifecycle import (
    ALLOWED_TRANSITIONS, can_transition, ensure_transition, is_terminal
)
from freightlink.modules.shipments.schemas import ShipmentStatus as S

pytestmark = pytest.mark.unit


class TestTransitionTable:
    """Forward-only progress with cancellation from any open state"""

    @pytest.mark.parametrize("current,target", [
        (S.PENDING, S.CANCELLED),
        (S.ACTIVE, S.PICKED_UP),
        (S.ACTIVE, S.DELIVERED),
        (S.PICKED_UP, S.IN_TRANSIT),
        (S.IN_TRANSIT, S.DELIVERED),
        (S.IN_TRANSIT, S.CANCELLED),
    ])
    def test_legal_moves(self, current, target):
        assert can_transition(current, target)
        ensure_transition(current, target)

    @pytest.mark.parametrize("current,target", [
        (S.PENDING, S.ACTIVE),
        (S.PENDING, S.DELIVERED),
        (S.PENDING, S.IN_TRANSIT),
        (S.IN_TRANSIT, S.PICKED_UP),
        (S.DELIVERED, S.CANCELLED),
        (S.CANCELLED, S.PENDING),
    ])
    def test_illegal_moves_raise_state_error(self, current, target):
        assert not can_transition(current, target)
        with pytest.raises(ShipmentStateError) as exc_info:
            ensure_transition(current, target)
        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "state_error"

    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(S)

    def test_terminal_states_have_no_exits(self):
        for status in (S.DELIVERED, S.CANCELLED):
            assert is_terminal(status)
            assert ALLOWED_TRANSITIONS[status] == frozenset()

    def test_same_status_is_a_no_op_only_while_open(self):
        assert can_transition(S.IN_TRANSIT, S.IN_TRANSIT)
        assert not can_transition(S.DELIVERED, S.DELIVERED)

    def test_accepts_raw_string_values(self):
        assert can_transition("active", "picked_up")
        assert not can_transition("pending", "delivered")
