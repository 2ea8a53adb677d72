# backend/modules/menu/routes/menu_routes.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from core.database import get_db
from ..models.menu_models import MenuCategory
from ..schemas.menu_schemas import MenuItemCreate, MenuItemUpdate, MenuItemOut
from ..services.menu_service import MenuService


router = APIRouter(prefix="/menu-items", tags=["Menu Management"])


def get_menu_service(db: Session = Depends(get_db)) -> MenuService:
    """Dependency to get menu service instance"""
    return MenuService(db)


@router.get("/", response_model=List[MenuItemOut])
async def get_menu_items(
    restaurant_id: int = Query(...),
    category: Optional[MenuCategory] = Query(None),
    available_only: bool = Query(False, description="Hide unavailable items"),
    menu_service: MenuService = Depends(get_menu_service),
):
    """Get menu items for a restaurant"""
    return menu_service.get_menu_items(restaurant_id, category, available_only)


@router.post("/", response_model=MenuItemOut, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    item_data: MenuItemCreate,
    menu_service: MenuService = Depends(get_menu_service),
):
    return menu_service.create_menu_item(item_data)


@router.put("/{item_id}", response_model=MenuItemOut)
async def update_menu_item(
    item_id: int,
    item_data: MenuItemUpdate,
    menu_service: MenuService = Depends(get_menu_service),
):
    """Update a menu item"""
    return menu_service.update_menu_item(item_id, item_data)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_menu_item(
    item_id: int,
    menu_service: MenuService = Depends(get_menu_service),
):
    """Delete a menu item that has never been ordered"""
    menu_service.delete_menu_item(item_id)
