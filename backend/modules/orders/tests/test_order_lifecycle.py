import pytest

from core.exceptions import InvalidTransitionError, ValidationError
from modules.orders.enums.order_enums import OrderStatus
from modules.orders.services.order_lifecycle import (
    is_active, next_status, validate_transition
)

ORDERED = [
    OrderStatus.PLACED,
    OrderStatus.UNDER_PROCESS,
    OrderStatus.SERVED,
    OrderStatus.COMPLETED,
    OrderStatus.PAID,
]


class TestOrderLifecycle:

    @pytest.mark.parametrize("current,target", list(zip(ORDERED, ORDERED[1:])))
    def test_each_step_forward_is_allowed(self, current, target):
        """Test the immediate successor is always accepted."""
        assert validate_transition(current, target) == target
        assert next_status(current) == target

    @pytest.mark.parametrize("current", ORDERED)
    @pytest.mark.parametrize("target", ORDERED)
    def test_everything_else_is_rejected(self, current, target):
        """Test skips, repeats and backwards moves are rejected."""
        if ORDERED.index(target) == ORDERED.index(current) + 1:
            return
        with pytest.raises(InvalidTransitionError) as exc_info:
            validate_transition(current, target)
        assert exc_info.value.status_code == 400
        assert exc_info.value.current_status == current.value

    def test_paid_is_terminal(self):
        assert next_status(OrderStatus.PAID) is None

    def test_paid_is_unreachable_without_completion(self):
        """Test paid can only follow completed."""
        for status in ORDERED[:3]:
            with pytest.raises(InvalidTransitionError):
                validate_transition(status, OrderStatus.PAID)

    def test_accepts_raw_values(self):
        assert validate_transition("served", "completed") == \
            OrderStatus.COMPLETED

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_transition("placed", "cancelled")
        assert exc_info.value.context["target_status"] == "cancelled"

    @pytest.mark.parametrize("status,active", [
        (OrderStatus.PLACED, True),
        (OrderStatus.UNDER_PROCESS, True),
        (OrderStatus.SERVED, True),
        (OrderStatus.COMPLETED, True),
        (OrderStatus.PAID, False),
    ])
    def test_active_statuses_hold_the_table(self, status, active):
        assert is_active(status) is active
