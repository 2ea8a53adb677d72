"""
Dashboard statistics for a restaurant.

Figures are folded from the current orders on every request; nothing is
cached or counted incrementally.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional
from sqlalchemy.orm import Session, joinedload

from core.exceptions import NotFoundError
from modules.core.models import Restaurant
from modules.tables.models.table_models import Table
from ..enums.order_enums import (
    OrderStatus, ACTIVE_ORDER_STATUSES, IN_SERVICE_ORDER_STATUSES,
    FINISHED_ORDER_STATUSES
)
from ..models.order_models import Order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    active_orders: int
    completed_orders: int
    occupied_tables: int
    total_tables: int
    todays_revenue: int


def compute_dashboard_stats(orders: Iterable, total_tables: int,
                            today: date) -> DashboardStats:
    """
    Fold ``orders`` into dashboard figures.

    Orders need ``status``, ``table_id``, ``created_at`` and
    ``total_amount``. A table is occupied while it holds an order that has
    not been paid; it counts once however many such orders it has.
    Revenue is the total of paid orders created on ``today``.
    """
    active_orders = 0
    completed_orders = 0
    occupied = set()
    revenue = 0

    for order in orders:
        status = OrderStatus(order.status)
        if status in IN_SERVICE_ORDER_STATUSES:
            active_orders += 1
        if status in FINISHED_ORDER_STATUSES:
            completed_orders += 1
        if status in ACTIVE_ORDER_STATUSES and order.table_id is not None:
            occupied.add(order.table_id)
        if status == OrderStatus.PAID and order.created_at.date() == today:
            revenue += order.total_amount

    return DashboardStats(
        active_orders=active_orders,
        completed_orders=completed_orders,
        occupied_tables=len(occupied),
        total_tables=total_tables,
        todays_revenue=revenue,
    )


async def get_dashboard_stats(db: Session, restaurant_id: int,
                              today: Optional[date] = None) -> DashboardStats:
    restaurant = db.query(Restaurant).filter(
        Restaurant.id == restaurant_id
    ).first()
    if not restaurant:
        raise NotFoundError(f"Restaurant with id {restaurant_id} not found")

    orders = db.query(Order).options(joinedload(Order.order_items)).filter(
        Order.restaurant_id == restaurant_id
    ).all()
    total_tables = db.query(Table).filter(
        Table.restaurant_id == restaurant_id
    ).count()

    stats = compute_dashboard_stats(orders, total_tables, today or date.today())
    logger.debug(f"Dashboard stats for restaurant {restaurant_id}: {stats}")
    return stats
