# backend/modules/core/__init__.py
"""Core module containing the restaurant, its floor plans and opening hours."""

from .models import Restaurant, FloorPlan, OperatingHours

__all__ = [
    "Restaurant",
    "FloorPlan",
    "OperatingHours",
]
