# backend/modules/menu/services/menu_service.py

import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, NotFoundError
from modules.core.models import Restaurant
from modules.orders.models.order_models import OrderItem
from ..models.menu_models import MenuItem, MenuCategory
from ..schemas.menu_schemas import MenuItemCreate, MenuItemUpdate

logger = logging.getLogger(__name__)


class MenuService:
    """Menu items a restaurant offers; prices feed order items"""

    def __init__(self, db: Session):
        self.db = db

    def get_menu_items(
        self,
        restaurant_id: int,
        category: Optional[MenuCategory] = None,
        available_only: bool = False,
    ) -> List[MenuItem]:
        query = self.db.query(MenuItem).filter(MenuItem.restaurant_id == restaurant_id)
        if category:
            query = query.filter(MenuItem.category == category.value)
        if available_only:
            query = query.filter(MenuItem.available.is_(True))
        return query.order_by(MenuItem.category, MenuItem.name).all()

    def get_menu_item(self, item_id: int) -> MenuItem:
        item = self.db.query(MenuItem).filter(MenuItem.id == item_id).first()
        if not item:
            raise NotFoundError(f"Menu item with ID {item_id} not found")
        return item

    def create_menu_item(self, item_data: MenuItemCreate) -> MenuItem:
        restaurant = (
            self.db.query(Restaurant).filter(Restaurant.id == item_data.restaurant_id).first()
        )
        if not restaurant:
            raise NotFoundError(f"Restaurant with ID {item_data.restaurant_id} not found")

        data = item_data.model_dump()
        data["category"] = item_data.category.value
        item = MenuItem(**data)
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.info(f"Created menu item {item.id} ({item.name}) at {item.price}")
        return item

    def update_menu_item(self, item_id: int, item_data: MenuItemUpdate) -> MenuItem:
        """Price changes apply to future order items only"""
        item = self.get_menu_item(item_id)
        for field, value in item_data.model_dump(exclude_unset=True).items():
            if field == "category":
                value = value.value
            setattr(item, field, value)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_menu_item(self, item_id: int) -> None:
        """Items already ordered stay for order history; mark them unavailable instead"""
        item = self.get_menu_item(item_id)
        ordered = self.db.query(OrderItem).filter(OrderItem.menu_item_id == item_id).first()
        if ordered:
            raise ConflictError(
                detail=f"Menu item {item_id} has been ordered and cannot be deleted",
                context={"menu_item_id": item_id},
            )
        self.db.delete(item)
        self.db.commit()
        logger.info(f"Deleted menu item {item_id}")
