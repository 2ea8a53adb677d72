from sqlalchemy.orm import Session
from typing import List, Optional
from ..services.order_service import (
    create_order as create_order_service,
    create_order_from_cart as create_order_from_cart_service,
    add_order_item as add_order_item_service,
    update_order_status, process_payment as process_payment_service,
    get_order_by_id as get_order_service, get_orders_service,
    get_active_order_for_table, get_payment_for_order
)
from ..services.stats_service import get_dashboard_stats
from ..schemas.order_schemas import (
    OrderCreate, OrderFromCart, OrderItemCreate, OrderOut,
    OrderTransitionOut, PaymentOut, DashboardStatsOut
)
from ..enums.order_enums import OrderStatus
from ..enums.payment_enums import PaymentMethod


async def create_order(order_data: OrderCreate, db: Session) -> OrderOut:
    order = await create_order_service(
        db, order_data.table_id, user_id=order_data.user_id
    )
    return OrderOut.model_validate(order)


async def create_order_from_cart(cart: OrderFromCart, db: Session) -> OrderOut:
    order = await create_order_from_cart_service(
        db, cart.table_id, cart.items, user_id=cart.user_id
    )
    return OrderOut.model_validate(order)


async def add_order_item(order_id: int, item: OrderItemCreate,
                         db: Session) -> OrderOut:
    order = await add_order_item_service(
        db, order_id, item.menu_item_id, item.quantity
    )
    return OrderOut.model_validate(order)


async def get_order_by_id(db: Session, order_id: int) -> OrderOut:
    return OrderOut.model_validate(await get_order_service(db, order_id))


async def list_orders(
    db: Session,
    restaurant_id: Optional[int] = None,
    status: Optional[OrderStatus] = None,
    table_id: Optional[int] = None,
    limit: int = 100,
    offset: int = 0
) -> List[OrderOut]:
    orders = await get_orders_service(
        db, restaurant_id=restaurant_id, status=status, table_id=table_id,
        limit=limit, offset=offset
    )
    return [OrderOut.model_validate(order) for order in orders]


async def get_table_active_order(db: Session,
                                 table_id: int) -> Optional[OrderOut]:
    order = await get_active_order_for_table(db, table_id)
    return OrderOut.model_validate(order) if order else None


async def transition_order(order_id: int, target: OrderStatus,
                           db: Session) -> OrderTransitionOut:
    order, payment = await update_order_status(db, order_id, target)
    return OrderTransitionOut(
        order=OrderOut.model_validate(order),
        payment=PaymentOut.model_validate(payment) if payment else None
    )


async def process_payment(order_id: int, method: PaymentMethod,
                          db: Session) -> PaymentOut:
    payment = await process_payment_service(db, order_id, method)
    return PaymentOut.model_validate(payment)


async def get_order_payment(order_id: int, db: Session) -> PaymentOut:
    return PaymentOut.model_validate(await get_payment_for_order(db, order_id))


async def get_stats(restaurant_id: int, db: Session) -> DashboardStatsOut:
    stats = await get_dashboard_stats(db, restaurant_id)
    return DashboardStatsOut.model_validate(stats)
