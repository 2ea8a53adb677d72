# backend/modules/core/schemas/__init__.py
"""Core schemas module"""

from .core_schemas import (
    # Restaurant schemas
    RestaurantBase, RestaurantCreate, RestaurantUpdate, RestaurantResponse,
    # Floor plan schemas
    FloorPlanBase, FloorPlanCreate, FloorPlanUpdate, FloorPlanResponse, FloorPlanWithTables,
    # Operating hours schemas
    OperatingHoursBase, OperatingHoursCreate, OperatingHoursUpdate, OperatingHoursResponse,
)

__all__ = [
    # Restaurant
    "RestaurantBase",
    "RestaurantCreate",
    "RestaurantUpdate",
    "RestaurantResponse",
    # Floor plan
    "FloorPlanBase",
    "FloorPlanCreate",
    "FloorPlanUpdate",
    "FloorPlanResponse",
    "FloorPlanWithTables",
    # Operating hours
    "OperatingHoursBase",
    "OperatingHoursCreate",
    "OperatingHoursUpdate",
    "OperatingHoursResponse",
]
