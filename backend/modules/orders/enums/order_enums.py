from enum import Enum


class OrderStatus(str, Enum):
    PLACED = "placed"
    UNDER_PROCESS = "under_process"
    SERVED = "served"
    COMPLETED = "completed"
    PAID = "paid"


# An order in any of these holds its table. A table carries at most one.
ACTIVE_ORDER_STATUSES = (
    OrderStatus.PLACED,
    OrderStatus.UNDER_PROCESS,
    OrderStatus.SERVED,
    OrderStatus.COMPLETED,
)

# Still being worked on by the kitchen or floor staff.
IN_SERVICE_ORDER_STATUSES = (
    OrderStatus.PLACED,
    OrderStatus.UNDER_PROCESS,
    OrderStatus.SERVED,
)

FINISHED_ORDER_STATUSES = (
    OrderStatus.COMPLETED,
    OrderStatus.PAID,
)

# Items may still be added while the kitchen has not served the order.
ITEM_EDITABLE_ORDER_STATUSES = (
    OrderStatus.PLACED,
    OrderStatus.UNDER_PROCESS,
)
