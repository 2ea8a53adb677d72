"""
Order status state machine.

Orders move strictly forward through
placed -> under_process -> served -> completed -> paid.
Every other target, including staying put or skipping ahead, is rejected.
"""

from typing import Optional, Union

from core.exceptions import InvalidTransitionError
from ..enums.order_enums import OrderStatus, ACTIVE_ORDER_STATUSES

NEXT_STATUS = {
    OrderStatus.PLACED: OrderStatus.UNDER_PROCESS,
    OrderStatus.UNDER_PROCESS: OrderStatus.SERVED,
    OrderStatus.SERVED: OrderStatus.COMPLETED,
    OrderStatus.COMPLETED: OrderStatus.PAID,
    OrderStatus.PAID: None,
}


def next_status(current: Union[OrderStatus, str]) -> Optional[OrderStatus]:
    """The single legal successor of ``current``; None once paid."""
    return NEXT_STATUS[OrderStatus(current)]


def validate_transition(
    current: Union[OrderStatus, str], target: Union[OrderStatus, str]
) -> OrderStatus:
    """Return ``target`` as an OrderStatus or raise InvalidTransitionError."""
    current_value = current.value if isinstance(current, OrderStatus) else current
    target_value = target.value if isinstance(target, OrderStatus) else target

    try:
        current_status = OrderStatus(current_value)
        target_status = OrderStatus(target_value)
    except ValueError:
        raise InvalidTransitionError(current_value, target_value)

    if NEXT_STATUS[current_status] != target_status:
        raise InvalidTransitionError(current_status.value, target_status.value)
    return target_status


def is_active(status: Union[OrderStatus, str]) -> bool:
    """Whether an order in ``status`` still holds its table."""
    return OrderStatus(status) in ACTIVE_ORDER_STATUSES
