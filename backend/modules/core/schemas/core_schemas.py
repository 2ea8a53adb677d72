# backend/modules/core/schemas/core_schemas.py
"""
Pydantic schemas for core models.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime, time

from modules.tables.schemas.table_schemas import TableResponse


# ========== Restaurant Schemas ==========


class RestaurantBase(BaseModel):
    """Base schema for restaurant"""

    name: str = Field(..., min_length=1, max_length=200, description="Restaurant name")
    description: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    currency: str = Field(
        "USD", min_length=3, max_length=3, description="ISO currency code"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty or whitespace only")
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        return v.upper()


class RestaurantCreate(RestaurantBase):
    pass


class RestaurantUpdate(BaseModel):
    """Partial update; omitted fields keep their current value"""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            raise ValueError("Name cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty or whitespace only")
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        if v is None:
            raise ValueError("Currency cannot be null")
        return v.upper()


class RestaurantResponse(RestaurantBase):
    id: int
    is_configured: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ========== Floor Plan Schemas ==========


class FloorPlanBase(BaseModel):
    """Base schema for floor plan; dimensions are grid units"""

    floor_number: int = Field(..., ge=0)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class FloorPlanCreate(FloorPlanBase):
    restaurant_id: int


class FloorPlanUpdate(BaseModel):
    floor_number: Optional[int] = Field(None, ge=0)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    is_active: Optional[bool] = None

    @field_validator("floor_number", "name", "width", "height", "is_active")
    @classmethod
    def reject_null(cls, v):
        # Only runs for values the client actually sent
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class FloorPlanResponse(FloorPlanBase):
    id: int
    restaurant_id: int
    is_active: bool
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class FloorPlanWithTables(FloorPlanResponse):
    tables: List[TableResponse] = []


# ========== Operating Hours Schemas ==========


class OperatingHoursBase(BaseModel):
    """Opening hours for one weekday; 0 = Sunday"""

    day_of_week: int = Field(..., ge=0, le=6)
    open_time: time
    close_time: time
    last_seating_time: Optional[time] = Field(
        None, description="Defaults to 21:00, or closing time if that is earlier"
    )
    is_closed: bool = False


class OperatingHoursCreate(OperatingHoursBase):
    restaurant_id: int


class OperatingHoursUpdate(BaseModel):
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    last_seating_time: Optional[time] = None
    is_closed: Optional[bool] = None

    @field_validator("open_time", "close_time", "last_seating_time", "is_closed")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class OperatingHoursResponse(OperatingHoursBase):
    id: int
    restaurant_id: int
    model_config = ConfigDict(from_attributes=True)
