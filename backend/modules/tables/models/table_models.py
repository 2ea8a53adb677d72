# backend/modules/tables/models/table_models.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    Enum as SQLEnum,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from enum import Enum

from core.database import Base
from core.mixins import TimestampMixin


class TableStatus(str, Enum):
    """Table availability status"""

    AVAILABLE = "available"
    RESERVED = "reserved"
    OCCUPIED = "occupied"


class TableShape(str, Enum):
    """Table shape for visual representation"""

    RECTANGLE = "rectangle"
    SQUARE = "square"
    ROUND = "round"
    OVAL = "oval"


class Table(Base, TimestampMixin):
    """Restaurant table; the unit customers scan and order against"""

    __tablename__ = "tables"

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )

    table_number = Column(Integer, nullable=False)
    floor_number = Column(Integer, nullable=False)

    # Path encoded in the printed QR code, generated once at creation
    qr_code_url = Column(String(200))

    status = Column(SQLEnum(TableStatus), nullable=False, default=TableStatus.AVAILABLE)
    # When the guests of a reserved table are expected
    reservation_time = Column(DateTime)

    # Relationships
    restaurant = relationship("Restaurant")
    config = relationship(
        "TableConfig",
        uselist=False,
        back_populates="table",
        cascade="all, delete-orphan",
    )
    orders = relationship("Order", back_populates="table")

    __table_args__ = (
        UniqueConstraint(
            "restaurant_id", "table_number", name="uix_table_restaurant_number"
        ),
        CheckConstraint("table_number >= 1", name="chk_table_number_positive"),
    )

    def __repr__(self):
        return f"<Table(id={self.id}, number={self.table_number}, floor={self.floor_number})>"


class TableConfig(Base, TimestampMixin):
    """Geometric placement of a table on a floor plan grid"""

    __tablename__ = "table_configs"

    id = Column(Integer, primary_key=True)
    table_id = Column(
        Integer, ForeignKey("tables.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    floor_plan_id = Column(
        Integer, ForeignKey("floor_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Top-left grid coordinate and size in grid units
    x_position = Column(Integer, nullable=False)
    y_position = Column(Integer, nullable=False)
    width = Column(Integer, nullable=False, default=1)
    height = Column(Integer, nullable=False, default=1)

    shape = Column(String(20), nullable=False, default=TableShape.RECTANGLE.value)
    seats = Column(Integer, nullable=False, default=4)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    table = relationship("Table", back_populates="config")
    floor_plan = relationship("FloorPlan", back_populates="table_configs")

    __table_args__ = (
        CheckConstraint("width >= 1 AND height >= 1", name="chk_table_config_size"),
        CheckConstraint("seats >= 1", name="chk_table_config_seats"),
    )
