# backend/modules/tables/schemas/table_schemas.py

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator, ConfigDict

from ..models.table_models import TableStatus, TableShape
from ..services.numbering import NumberingMode


# Table config schemas
class TableConfigBase(BaseModel):
    """Placement of a table on the floor plan grid"""

    x_position: int = Field(..., ge=0)
    y_position: int = Field(..., ge=0)
    width: int = Field(3, ge=1)
    height: int = Field(3, ge=1)
    shape: TableShape = TableShape.RECTANGLE
    seats: int = Field(4, ge=1)


class TableConfigUpdate(BaseModel):
    """Manual placement edit; omitted fields keep their current value"""

    x_position: Optional[int] = Field(None, ge=0)
    y_position: Optional[int] = Field(None, ge=0)
    width: Optional[int] = Field(None, ge=1)
    height: Optional[int] = Field(None, ge=1)
    shape: Optional[TableShape] = None
    seats: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None

    @field_validator("x_position", "y_position", "width", "height", "shape", "seats", "is_active")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class TableConfigResponse(TableConfigBase):
    id: int
    table_id: int
    floor_plan_id: int
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


# Table schemas
class TableCreate(BaseModel):
    """Manual creation of a single table"""

    floor_plan_id: int
    table_number: int = Field(..., ge=1)
    config: TableConfigBase


class TableResponse(BaseModel):
    id: int
    restaurant_id: int
    table_number: int
    floor_number: int
    qr_code_url: Optional[str] = None
    status: TableStatus
    reservation_time: Optional[datetime] = None
    config: Optional[TableConfigResponse] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class TableReservationUpdate(BaseModel):
    """Toggle between available and reserved"""

    reserved: bool
    reservation_time: Optional[datetime] = Field(
        None, description="Expected arrival; defaults to now when reserving"
    )


class TableQRCodeResponse(BaseModel):
    table_id: int
    table_number: int
    qr_code_url: str
    qr_code_image: str


# Layout generation schemas
class FloorTableCount(BaseModel):
    floor_plan_id: int
    table_count: int


class LayoutRequest(BaseModel):
    """Per-floor table counts plus the numbering policy"""

    restaurant_id: int
    floors: List[FloorTableCount] = Field(..., min_length=1)
    mode: NumberingMode = NumberingMode.AUTOMATIC
    starting_number: int = 1

    @field_validator("floors")
    @classmethod
    def validate_unique_floors(cls, v):
        ids = [floor.floor_plan_id for floor in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Each floor plan may appear only once")
        return v


class LayoutTableConfig(BaseModel):
    x_position: int
    y_position: int
    width: int
    height: int
    shape: str
    seats: int


class LayoutTable(BaseModel):
    """One generated table, as previewed or persisted"""

    table_number: int
    floor_number: int
    floor_plan_id: int
    qr_code_url: str
    table_config: LayoutTableConfig
    id: Optional[int] = None


class FloorLayoutResult(BaseModel):
    floor_plan_id: int
    floor_number: int
    tables: List[LayoutTable]


class LayoutResponse(BaseModel):
    restaurant_id: int
    mode: NumberingMode
    total_tables: int
    floors: List[FloorLayoutResult]
    persisted: bool = False
