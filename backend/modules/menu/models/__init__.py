# backend/modules/menu/models/__init__.py

from .menu_models import MenuItem, MenuCategory

__all__ = [
    "MenuItem",
    "MenuCategory",
]
