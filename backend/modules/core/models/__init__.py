# backend/modules/core/models/__init__.py
"""Core models module"""

from .core_models import Restaurant, FloorPlan, OperatingHours

__all__ = [
    "Restaurant",
    "FloorPlan",
    "OperatingHours",
]
