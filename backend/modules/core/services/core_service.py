# backend/modules/core/services/core_service.py
"""
Service layer for core models (Restaurant, FloorPlan, OperatingHours).
"""

import logging
from datetime import time
from typing import List
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import ConflictError, NotFoundError, ValidationError
from modules.orders.enums.order_enums import ACTIVE_ORDER_STATUSES
from modules.orders.models.order_models import Order
from modules.tables.models.table_models import Table, TableConfig
from modules.tables.services.geometry import FloorBounds, Rect, validate_placement
from ..models import Restaurant, FloorPlan, OperatingHours
from ..schemas import (
    RestaurantCreate,
    RestaurantUpdate,
    FloorPlanCreate,
    FloorPlanUpdate,
    OperatingHoursCreate,
    OperatingHoursUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_LAST_SEATING_TIME = time(21, 0)


class CoreService:
    """Service for managing core entities"""

    def __init__(self, db: Session):
        self.db = db

    # ========== Restaurant Methods ==========

    def get_restaurant(self, restaurant_id: int) -> Restaurant:
        """Get restaurant by ID"""
        restaurant = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
        if not restaurant:
            raise NotFoundError(f"Restaurant with ID {restaurant_id} not found")
        return restaurant

    def create_restaurant(self, restaurant_data: RestaurantCreate) -> Restaurant:
        """Create a new restaurant"""
        restaurant = Restaurant(**restaurant_data.model_dump())
        self.db.add(restaurant)
        self.db.commit()
        self.db.refresh(restaurant)
        logger.info(f"Created restaurant {restaurant.id} ({restaurant.name})")
        return restaurant

    def update_restaurant(self, restaurant_id: int, update_data: RestaurantUpdate) -> Restaurant:
        """Update restaurant details"""
        restaurant = self.get_restaurant(restaurant_id)
        for field, value in update_data.model_dump(exclude_unset=True).items():
            setattr(restaurant, field, value)
        self.db.commit()
        self.db.refresh(restaurant)
        logger.info(f"Updated restaurant {restaurant.id}")
        return restaurant

    # ========== Floor Plan Methods ==========

    def get_floor_plan(self, floor_plan_id: int) -> FloorPlan:
        floor_plan = self.db.query(FloorPlan).filter(FloorPlan.id == floor_plan_id).first()
        if not floor_plan:
            raise NotFoundError(f"Floor plan with ID {floor_plan_id} not found")
        return floor_plan

    def get_floor_plans(self, restaurant_id: int, include_inactive: bool = False) -> List[FloorPlan]:
        """Floor plans in the order the admin sees them"""
        query = self.db.query(FloorPlan).filter(FloorPlan.restaurant_id == restaurant_id)
        if not include_inactive:
            query = query.filter(FloorPlan.is_active.is_(True))
        return query.order_by(FloorPlan.floor_number, FloorPlan.id).all()

    def get_floor_plan_tables(self, floor_plan_id: int) -> List[Table]:
        return (
            self.db.query(Table)
            .join(TableConfig, TableConfig.table_id == Table.id)
            .filter(TableConfig.floor_plan_id == floor_plan_id)
            .order_by(Table.table_number)
            .all()
        )

    def create_floor_plan(self, floor_data: FloorPlanCreate) -> FloorPlan:
        """Create a new floor plan for a restaurant"""
        self.get_restaurant(floor_data.restaurant_id)
        self._ensure_floor_number_free(floor_data.restaurant_id, floor_data.floor_number)

        floor_plan = FloorPlan(**floor_data.model_dump())
        self.db.add(floor_plan)
        self.db.commit()
        self.db.refresh(floor_plan)
        logger.info(
            f"Created floor plan {floor_plan.id} (floor {floor_plan.floor_number}, "
            f"{floor_plan.width}x{floor_plan.height}) for restaurant {floor_plan.restaurant_id}"
        )
        return floor_plan

    def update_floor_plan(self, floor_plan_id: int, update_data: FloorPlanUpdate) -> FloorPlan:
        """
        Update a floor plan.

        Renumbering a floor that already has tables is refused, since its
        tables' QR codes encode the floor number. Resizing is refused if an
        existing table would end up inside the edge margin.
        """
        floor_plan = self.get_floor_plan(floor_plan_id)
        changes = update_data.model_dump(exclude_unset=True)
        tables = self.get_floor_plan_tables(floor_plan_id)

        new_number = changes.get("floor_number")
        if new_number is not None and new_number != floor_plan.floor_number:
            if tables:
                raise ConflictError(
                    detail="Cannot renumber a floor that has tables; regenerate its layout instead",
                    context={"floor_plan_id": floor_plan_id},
                )
            self._ensure_floor_number_free(floor_plan.restaurant_id, new_number)

        bounds = FloorBounds(
            changes.get("width") or floor_plan.width,
            changes.get("height") or floor_plan.height,
        )
        violations = []
        for table in tables:
            config = table.config
            rect = Rect(config.x_position, config.y_position, config.width, config.height)
            for v in validate_placement(rect, bounds, settings.TABLE_LAYOUT_EDGE_MARGIN):
                violations.append(f"Table {table.table_number}: {v.message}")
        if violations:
            raise ValidationError(
                detail="Floor plan is too small for its tables", violations=violations
            )

        for field, value in changes.items():
            setattr(floor_plan, field, value)

        self.db.commit()
        self.db.refresh(floor_plan)
        return floor_plan

    def delete_floor_plan(self, floor_plan_id: int) -> None:
        """Delete a floor plan together with its tables"""
        floor_plan = self.get_floor_plan(floor_plan_id)
        tables = self.get_floor_plan_tables(floor_plan_id)

        if tables:
            active = (
                self.db.query(Order)
                .filter(
                    Order.table_id.in_([t.id for t in tables]),
                    Order.status.in_([s.value for s in ACTIVE_ORDER_STATUSES]),
                )
                .first()
            )
            if active:
                raise ConflictError(
                    detail="Floor plan has tables with active orders",
                    context={"floor_plan_id": floor_plan_id, "existing_order_id": active.id},
                )

        for table in tables:
            self.db.delete(table)
        self.db.delete(floor_plan)
        self.db.commit()
        logger.info(f"Deleted floor plan {floor_plan_id} and {len(tables)} tables")

    # ========== Operating Hours Methods ==========

    def get_operating_hours(self, restaurant_id: int) -> List[OperatingHours]:
        """Weekly hours, Sunday first"""
        return (
            self.db.query(OperatingHours)
            .filter(OperatingHours.restaurant_id == restaurant_id)
            .order_by(OperatingHours.day_of_week)
            .all()
        )

    def get_operating_hours_entry(self, hours_id: int) -> OperatingHours:
        hours = self.db.query(OperatingHours).filter(OperatingHours.id == hours_id).first()
        if not hours:
            raise NotFoundError(f"Operating hours with ID {hours_id} not found")
        return hours

    def create_operating_hours(self, hours_data: OperatingHoursCreate) -> OperatingHours:
        """Set the hours for one weekday; each day may be set once"""
        self.get_restaurant(hours_data.restaurant_id)
        existing = (
            self.db.query(OperatingHours)
            .filter(
                OperatingHours.restaurant_id == hours_data.restaurant_id,
                OperatingHours.day_of_week == hours_data.day_of_week,
            )
            .first()
        )
        if existing:
            raise ConflictError(
                detail=f"Hours for day {hours_data.day_of_week} already exist",
                context={"operating_hours_id": existing.id},
            )

        hours = OperatingHours(**hours_data.model_dump())
        if hours.last_seating_time is None:
            hours.last_seating_time = min(DEFAULT_LAST_SEATING_TIME, hours.close_time)
        self._validate_hours(hours)

        self.db.add(hours)
        self.db.commit()
        self.db.refresh(hours)
        logger.info(
            f"Set hours for restaurant {hours.restaurant_id} day {hours.day_of_week}: "
            f"{hours.open_time}-{hours.close_time}"
        )
        return hours

    def update_operating_hours(self, hours_id: int, update_data: OperatingHoursUpdate) -> OperatingHours:
        hours = self.get_operating_hours_entry(hours_id)
        for field, value in update_data.model_dump(exclude_unset=True).items():
            setattr(hours, field, value)
        try:
            self._validate_hours(hours)
        except ValidationError:
            self.db.rollback()
            raise
        self.db.commit()
        self.db.refresh(hours)
        return hours

    def delete_operating_hours(self, hours_id: int) -> None:
        hours = self.get_operating_hours_entry(hours_id)
        self.db.delete(hours)
        self.db.commit()

    def _validate_hours(self, hours: OperatingHours) -> None:
        """Closed days keep whatever times they had; open days need a sane window"""
        if hours.is_closed:
            return
        violations = []
        if hours.close_time <= hours.open_time:
            violations.append("Closing time must be after opening time")
        elif not hours.open_time <= hours.last_seating_time <= hours.close_time:
            violations.append("Last seating must be between opening and closing time")
        if violations:
            raise ValidationError(detail="Invalid operating hours", violations=violations)

    def _ensure_floor_number_free(self, restaurant_id: int, floor_number: int) -> None:
        existing = (
            self.db.query(FloorPlan)
            .filter(
                FloorPlan.restaurant_id == restaurant_id,
                FloorPlan.floor_number == floor_number,
            )
            .first()
        )
        if existing:
            raise ConflictError(
                detail=f"Floor {floor_number} already exists",
                context={"floor_plan_id": existing.id},
            )

