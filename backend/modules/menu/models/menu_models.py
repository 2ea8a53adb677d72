# backend/modules/menu/models/menu_models.py

from sqlalchemy import (Column, Integer, String, ForeignKey, Text, Boolean,
                        JSON, CheckConstraint)
from enum import Enum
from core.database import Base
from core.mixins import TimestampMixin


class MenuCategory(str, Enum):
    STARTERS = "starters"
    MAIN_COURSE = "main_course"
    DESSERTS = "desserts"
    BEVERAGES = "beverages"
    SPECIALS = "specials"


class MenuItem(Base, TimestampMixin):
    """Individual menu items"""
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"),
                           nullable=False, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    # Minor currency units (cents). Order items copy this at order time.
    price = Column(Integer, nullable=False)
    available = Column(Boolean, nullable=False, default=True)
    category = Column(String(50), nullable=False, index=True)
    image_url = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_menu_item_price"),
    )

    def __repr__(self):
        return f"<MenuItem(id={self.id}, name='{self.name}', price={self.price})>"
