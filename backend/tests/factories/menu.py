# backend/tests/factories/menu.py

from factory import Faker, LazyAttribute
from .base import BaseFactory
from .restaurant import RestaurantFactory
from modules.menu.models.menu_models import MenuItem, MenuCategory


class MenuItemFactory(BaseFactory):
    """Factory for creating menu items. Prices are in cents."""

    class Meta:
        model = MenuItem

    restaurant_id = LazyAttribute(lambda obj: RestaurantFactory().id)
    name = Faker("catch_phrase")
    description = Faker("sentence")
    price = 1200
    available = True
    category = MenuCategory.MAIN_COURSE.value
