# backend/tests/factories/restaurant.py

from datetime import time

import factory
from factory import Faker, Sequence, LazyAttribute
from .base import BaseFactory
from modules.core.models.core_models import Restaurant, FloorPlan, OperatingHours
from modules.tables.models.table_models import Table, TableConfig, TableStatus


class RestaurantFactory(BaseFactory):
    """Factory for creating restaurants."""

    class Meta:
        model = Restaurant

    name = Faker("company")
    address = Faker("address")
    currency = "USD"
    is_configured = False


class FloorPlanFactory(BaseFactory):
    """Factory for creating floor plans."""

    class Meta:
        model = FloorPlan

    restaurant_id = LazyAttribute(lambda obj: RestaurantFactory().id)
    floor_number = Sequence(lambda n: n + 1)
    name = LazyAttribute(lambda obj: f"Floor {obj.floor_number}")
    width = 20
    height = 15
    is_active = True


class TableFactory(BaseFactory):
    """Factory for creating tables without a floor placement."""

    class Meta:
        model = Table

    restaurant_id = LazyAttribute(lambda obj: RestaurantFactory().id)
    table_number = Sequence(lambda n: n + 1)
    floor_number = 1
    qr_code_url = LazyAttribute(
        lambda obj: f"/table/{obj.floor_number}/{obj.table_number}"
    )
    status = TableStatus.AVAILABLE


class TableConfigFactory(BaseFactory):
    """Factory for placing a table on a floor plan."""

    class Meta:
        model = TableConfig

    floor_plan = factory.SubFactory(FloorPlanFactory)
    table = factory.SubFactory(
        TableFactory,
        restaurant_id=factory.SelfAttribute("..floor_plan.restaurant_id"),
        floor_number=factory.SelfAttribute("..floor_plan.floor_number"),
    )
    x_position = 2
    y_position = 2
    width = 3
    height = 3
    shape = "rectangle"
    seats = 4


class OperatingHoursFactory(BaseFactory):
    """Factory for weekday opening hours."""

    class Meta:
        model = OperatingHours

    restaurant_id = LazyAttribute(lambda obj: RestaurantFactory().id)
    day_of_week = Sequence(lambda n: n % 7)
    open_time = time(11, 0)
    close_time = time(22, 0)
    last_seating_time = time(21, 0)
    is_closed = False
