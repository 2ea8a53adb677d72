# backend/modules/menu/schemas/menu_schemas.py

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional

from ..models.menu_models import MenuCategory


class MenuItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: int = Field(..., ge=0, description="Price in minor currency units")
    category: MenuCategory
    available: bool = True
    image_url: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None


class MenuItemCreate(MenuItemBase):
    restaurant_id: int


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    category: Optional[MenuCategory] = None
    available: Optional[bool] = None
    image_url: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None

    @field_validator("name", "price", "category", "available")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class MenuItemOut(MenuItemBase):
    id: int
    restaurant_id: int
    model_config = ConfigDict(from_attributes=True)
