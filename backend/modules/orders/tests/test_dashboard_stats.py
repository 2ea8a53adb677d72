from datetime import date, datetime, time, timedelta
from types import SimpleNamespace

import pytest

from core.exceptions import NotFoundError
from modules.orders.enums.order_enums import OrderStatus
from modules.orders.services.stats_service import (
    compute_dashboard_stats, get_dashboard_stats
)
from tests.factories import (
    OrderFactory, OrderWithItemsFactory, RestaurantFactory, TableFactory
)

TODAY = date(2026, 10, 19)
NOON = datetime.combine(TODAY, time(12, 0))


def order(status, table_id=1, total=0, created_at=NOON):
    return SimpleNamespace(status=status.value, table_id=table_id,
                           total_amount=total, created_at=created_at)


class TestComputeDashboardStats:

    def test_counts_by_status(self):
        orders = [
            order(OrderStatus.PLACED, table_id=1),
            order(OrderStatus.UNDER_PROCESS, table_id=2),
            order(OrderStatus.SERVED, table_id=3),
            order(OrderStatus.COMPLETED, table_id=4),
            order(OrderStatus.PAID, table_id=5, total=1000),
        ]

        stats = compute_dashboard_stats(orders, total_tables=10, today=TODAY)

        assert stats.active_orders == 3
        assert stats.completed_orders == 2
        assert stats.occupied_tables == 4
        assert stats.total_tables == 10
        assert stats.todays_revenue == 1000

    def test_table_counted_once(self):
        """Test occupancy counts tables, not orders."""
        orders = [
            order(OrderStatus.SERVED, table_id=1),
            order(OrderStatus.COMPLETED, table_id=1),
            order(OrderStatus.PAID, table_id=2),
            order(OrderStatus.PLACED, table_id=None),
        ]

        stats = compute_dashboard_stats(orders, total_tables=2, today=TODAY)

        assert stats.occupied_tables == 1

    def test_revenue_only_counts_paid_orders_from_today(self):
        orders = [
            order(OrderStatus.PAID, total=2900),
            order(OrderStatus.PAID, total=900,
                  created_at=datetime.combine(TODAY, time(23, 59))),
            order(OrderStatus.PAID, total=5000,
                  created_at=NOON - timedelta(days=1)),
            order(OrderStatus.COMPLETED, total=700),
        ]

        stats = compute_dashboard_stats(orders, total_tables=0, today=TODAY)

        assert stats.todays_revenue == 3800

    def test_no_orders(self):
        stats = compute_dashboard_stats([], total_tables=4, today=TODAY)
        assert (stats.active_orders, stats.occupied_tables,
                stats.todays_revenue) == (0, 0, 0)


class TestGetDashboardStats:

    @pytest.mark.asyncio
    async def test_revenue_scenario(self, db_session):
        """Test two paid orders today yield 3800 and yesterday's is ignored."""
        restaurant = RestaurantFactory()
        tables = [TableFactory(restaurant_id=restaurant.id) for _ in range(4)]

        OrderWithItemsFactory(
            table=tables[0], status=OrderStatus.PAID.value, created_at=NOON,
            items=[(1200, 2), (500, 1)]
        )
        OrderWithItemsFactory(
            table=tables[1], status=OrderStatus.PAID.value, created_at=NOON,
            items=[(300, 3)]
        )
        OrderWithItemsFactory(
            table=tables[2], status=OrderStatus.PAID.value,
            created_at=NOON - timedelta(days=1), items=[(4000, 1)]
        )
        OrderFactory(table=tables[3], status=OrderStatus.SERVED.value,
                     created_at=NOON)

        stats = await get_dashboard_stats(db_session, restaurant.id,
                                          today=TODAY)

        assert stats.todays_revenue == 3800
        assert stats.active_orders == 1
        assert stats.completed_orders == 3
        assert stats.occupied_tables == 1
        assert stats.total_tables == 4

    @pytest.mark.asyncio
    async def test_other_restaurants_are_ignored(self, db_session):
        restaurant = RestaurantFactory()
        OrderFactory(status=OrderStatus.PLACED.value)

        stats = await get_dashboard_stats(db_session, restaurant.id,
                                          today=TODAY)

        assert stats.active_orders == 0
        assert stats.total_tables == 0

    @pytest.mark.asyncio
    async def test_unknown_restaurant(self, db_session):
        with pytest.raises(NotFoundError):
            await get_dashboard_stats(db_session, 404, today=TODAY)
