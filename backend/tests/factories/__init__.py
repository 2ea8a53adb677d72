# backend/tests/factories/__init__.py

"""
Shared test factories for the TableFlow backend.

These factories provide reusable test data generation for all modules.
"""

from .base import BaseFactory, bind_session
from .restaurant import (
    RestaurantFactory, FloorPlanFactory, TableFactory, TableConfigFactory,
    OperatingHoursFactory
)
from .menu import MenuItemFactory
from .order import OrderFactory, OrderItemFactory, OrderWithItemsFactory

__all__ = [
    # Base
    'BaseFactory',
    'bind_session',

    # Restaurant and layout
    'RestaurantFactory',
    'FloorPlanFactory',
    'TableFactory',
    'TableConfigFactory',
    'OperatingHoursFactory',

    # Menu
    'MenuItemFactory',

    # Orders
    'OrderFactory',
    'OrderItemFactory',
    'OrderWithItemsFactory',
]
