# backend/modules/core/models/core_models.py
"""
Core models for the restaurant floor and ordering platform.
These are the tenant root and the floor plans that other modules hang off.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    ForeignKey,
    Text,
    Time,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from core.database import Base
from core.mixins import TimestampMixin


class Restaurant(Base, TimestampMixin):
    """
    Core restaurant entity. This is the root entity for multi-tenant data isolation.
    """
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True)

    name = Column(String(200), nullable=False)
    description = Column(Text)
    address = Column(String(500))
    phone = Column(String(20))
    email = Column(String(255))
    currency = Column(String(3), nullable=False, default="USD")  # ISO currency code

    # Flipped once floors and tables have been laid out
    is_configured = Column(Boolean, nullable=False, default=False)

    # Relationships
    floor_plans = relationship(
        "FloorPlan",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="FloorPlan.floor_number",
    )
    operating_hours = relationship(
        "OperatingHours",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="OperatingHours.day_of_week",
    )

    def __repr__(self):
        return f"<Restaurant(id={self.id}, name='{self.name}')>"


class FloorPlan(Base, TimestampMixin):
    """
    A named, sized grid representing one physical level of the restaurant.
    Width and height are in grid units; table configs are placed on this grid.
    """
    __tablename__ = "floor_plans"

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)

    floor_number = Column(Integer, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text)

    width = Column(Integer, nullable=False)
    height = Column(Integer, nullable=False)

    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    restaurant = relationship("Restaurant", back_populates="floor_plans")
    table_configs = relationship(
        "TableConfig",
        back_populates="floor_plan",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("restaurant_id", "floor_number", name="uix_floor_plan_restaurant_number"),
        CheckConstraint("width > 0 AND height > 0", name="chk_floor_plan_dimensions"),
    )

    def __repr__(self):
        return f"<FloorPlan(id={self.id}, floor_number={self.floor_number}, restaurant_id={self.restaurant_id})>"


class OperatingHours(Base, TimestampMixin):
    """
    Weekly opening hours, one row per weekday.
    Days count from 0 = Sunday; times are local wall-clock times.
    """
    __tablename__ = "operating_hours"

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)

    day_of_week = Column(Integer, nullable=False)
    open_time = Column(Time, nullable=False)
    close_time = Column(Time, nullable=False)
    last_seating_time = Column(Time, nullable=False)
    is_closed = Column(Boolean, nullable=False, default=False)

    restaurant = relationship("Restaurant", back_populates="operating_hours")

    __table_args__ = (
        UniqueConstraint("restaurant_id", "day_of_week", name="uix_operating_hours_restaurant_day"),
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="chk_operating_hours_day"),
    )

    def __repr__(self):
        return f"<OperatingHours(restaurant_id={self.restaurant_id}, day={self.day_of_week})>"
