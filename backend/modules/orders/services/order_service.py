import logging
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    ActiveOrderConflictError, NotFoundError, ValidationError
)
from modules.menu.models.menu_models import MenuItem
from modules.tables.models.table_models import Table, TableStatus
from ..enums.order_enums import (
    OrderStatus, ACTIVE_ORDER_STATUSES, ITEM_EDITABLE_ORDER_STATUSES
)
from ..enums.payment_enums import PaymentMethod, PaymentStatus
from ..models.order_models import Order, OrderItem, Payment
from ..schemas.order_schemas import CartItem
from .order_lifecycle import validate_transition

logger = logging.getLogger(__name__)

ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_ORDER_STATUSES]


def build_payment_url(order_id: int) -> str:
    return f"/payments/{order_id}"


async def get_order_by_id(db: Session, order_id: int) -> Order:
    order = db.query(Order).options(
        joinedload(Order.order_items), joinedload(Order.payment)
    ).filter(Order.id == order_id).first()

    if not order:
        raise NotFoundError(f"Order with id {order_id} not found")

    return order


async def get_active_order_for_table(db: Session, table_id: int) -> Optional[Order]:
    return db.query(Order).filter(
        Order.table_id == table_id,
        Order.status.in_(ACTIVE_STATUS_VALUES)
    ).first()


async def get_orders_service(
    db: Session,
    restaurant_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
    table_id: Optional[int] = None,
    limit: int = 100,
    offset: int = 0
) -> List[Order]:
    query = db.query(Order).options(joinedload(Order.order_items))

    if restaurant_id:
        query = query.filter(Order.restaurant_id == restaurant_id)
    if status:
        query = query.filter(Order.status == status.value)
    if table_id:
        query = query.filter(Order.table_id == table_id)

    return query.order_by(Order.created_at.desc(), Order.id.desc()) \
        .offset(offset).limit(limit).all()


async def get_payment_for_order(db: Session, order_id: int) -> Payment:
    await get_order_by_id(db, order_id)
    payment = db.query(Payment).filter(Payment.order_id == order_id).first()
    if not payment:
        raise NotFoundError(f"No payment exists for order {order_id}")
    return payment


def _get_table(db: Session, table_id: int) -> Table:
    table = db.query(Table).filter(Table.id == table_id).first()
    if not table:
        raise NotFoundError(f"Table with id {table_id} not found")
    return table


def _get_orderable_menu_item(db: Session, menu_item_id: int,
                             restaurant_id: int) -> MenuItem:
    menu_item = db.query(MenuItem).filter(
        MenuItem.id == menu_item_id,
        MenuItem.restaurant_id == restaurant_id
    ).first()
    if not menu_item:
        raise NotFoundError(f"Menu item with id {menu_item_id} not found")
    if not menu_item.available:
        raise ValidationError(
            detail=f"Menu item '{menu_item.name}' is currently unavailable",
            context={"menu_item_id": menu_item_id}
        )
    return menu_item


async def _ensure_table_free(db: Session, table_id: int) -> None:
    existing = await get_active_order_for_table(db, table_id)
    if existing:
        logger.warning(
            f"Rejected order for table {table_id}: "
            f"order {existing.id} is still {existing.status}"
        )
        raise ActiveOrderConflictError(table_id, existing.id)


async def _insert_order(db: Session, table: Table, user_id: Optional[int],
                        items: List[Tuple[MenuItem, int]]) -> Order:
    """
    Insert the order and its items in one transaction and mark the table
    occupied. A concurrent insert for the same table trips the partial
    unique index and surfaces as the same conflict as the upfront check.
    """
    order = Order(
        restaurant_id=table.restaurant_id,
        table_id=table.id,
        user_id=user_id,
        status=OrderStatus.PLACED.value
    )
    for menu_item, quantity in items:
        order.order_items.append(OrderItem(
            menu_item_id=menu_item.id,
            restaurant_id=table.restaurant_id,
            quantity=quantity,
            price=menu_item.price
        ))
    table.status = TableStatus.OCCUPIED
    table.reservation_time = None
    db.add(order)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = await get_active_order_for_table(db, table.id)
        if existing is None:
            raise
        logger.warning(
            f"Concurrent order for table {table.id} lost to order {existing.id}"
        )
        raise ActiveOrderConflictError(table.id, existing.id)

    db.refresh(order)
    logger.info(
        f"Order {order.id} placed on table {table.id} "
        f"with {len(items)} items"
    )
    return order


async def create_order(db: Session, table_id: int,
                       user_id: Optional[int] = None) -> Order:
    """Open an empty order on a table that has no active order."""
    table = _get_table(db, table_id)
    await _ensure_table_free(db, table_id)
    return await _insert_order(db, table, user_id, [])


async def create_order_from_cart(db: Session, table_id: int,
                                 items: List[CartItem],
                                 user_id: Optional[int] = None) -> Order:
    """
    Place an order with all of its items at once. Prices are copied from
    the menu so later menu edits do not change what the customer owes.
    Nothing is written if any item is rejected.
    """
    if not items:
        raise ValidationError(detail="Cart is empty")

    table = _get_table(db, table_id)
    await _ensure_table_free(db, table_id)

    resolved = []
    for item in items:
        if item.quantity < 1:
            raise ValidationError(
                detail="Quantity must be at least 1",
                context={"menu_item_id": item.menu_item_id}
            )
        menu_item = _get_orderable_menu_item(
            db, item.menu_item_id, table.restaurant_id
        )
        resolved.append((menu_item, item.quantity))

    return await _insert_order(db, table, user_id, resolved)


async def add_order_item(db: Session, order_id: int, menu_item_id: int,
                         quantity: int = 1) -> Order:
    order = await get_order_by_id(db, order_id)

    if OrderStatus(order.status) not in ITEM_EDITABLE_ORDER_STATUSES:
        raise ValidationError(
            detail=f"Items cannot be added to an order that is {order.status}",
            context={"order_id": order_id, "current_status": order.status}
        )
    if quantity < 1:
        raise ValidationError(detail="Quantity must be at least 1")

    menu_item = _get_orderable_menu_item(db, menu_item_id, order.restaurant_id)
    order.order_items.append(OrderItem(
        menu_item_id=menu_item.id,
        restaurant_id=order.restaurant_id,
        quantity=quantity,
        price=menu_item.price
    ))
    db.commit()
    db.refresh(order)
    return order


async def update_order_status(
    db: Session, order_id: int, target: OrderStatus
) -> Tuple[Order, Optional[Payment]]:
    """
    Advance an order to its next status.

    served -> completed opens a pending payment for the order total.
    completed -> paid settles that payment and frees the table.
    """
    order = await get_order_by_id(db, order_id)
    previous_status = order.status

    try:
        target_status = validate_transition(order.status, target)
    except ValidationError:
        logger.warning(
            f"Rejected transition of order {order_id} "
            f"from {previous_status} to {getattr(target, 'value', target)}"
        )
        raise

    payment = order.payment

    if target_status == OrderStatus.COMPLETED:
        if payment is None:
            payment = Payment(
                order_id=order.id,
                restaurant_id=order.restaurant_id,
                customer_id=order.user_id,
                amount=order.total_amount,
                status=PaymentStatus.PENDING.value,
                payment_url=build_payment_url(order.id)
            )
            db.add(payment)

    elif target_status == OrderStatus.PAID:
        if payment is None:
            raise ValidationError(
                detail=f"Order {order_id} has no payment to settle",
                context={"order_id": order_id}
            )
        payment.status = PaymentStatus.PAID.value
        payment.paid_at = datetime.now()
        if order.table is not None:
            order.table.status = TableStatus.AVAILABLE

    order.status = target_status.value
    db.commit()
    db.refresh(order)
    if payment is not None:
        db.refresh(payment)

    logger.info(
        f"Order {order.id} moved from {previous_status} to {order.status}"
    )
    return order, payment


async def process_payment(db: Session, order_id: int,
                          method: PaymentMethod) -> Payment:
    """
    Settle a completed order. No gateway is contacted: the method is
    recorded and the order moves to paid.
    """
    order = await get_order_by_id(db, order_id)
    if order.status != OrderStatus.COMPLETED.value:
        raise ValidationError(
            detail="Only completed orders can be paid",
            context={"order_id": order_id, "current_status": order.status}
        )

    if order.payment is None:
        order.payment = Payment(
            order_id=order.id,
            restaurant_id=order.restaurant_id,
            customer_id=order.user_id,
            amount=order.total_amount,
            status=PaymentStatus.PENDING.value,
            payment_url=build_payment_url(order.id)
        )
    order.payment.method = method.value
    db.flush()

    _, payment = await update_order_status(db, order_id, OrderStatus.PAID)
    logger.info(f"Payment for order {order_id} processed via {method.value}")
    return payment
