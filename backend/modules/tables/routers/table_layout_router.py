# backend/modules/tables/routers/table_layout_router.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.database import get_db
from ..schemas.table_schemas import (
    LayoutRequest,
    LayoutResponse,
    TableCreate,
    TableResponse,
    TableConfigUpdate,
    TableReservationUpdate,
    TableQRCodeResponse,
)
from ..services.layout_service import layout_service

router = APIRouter(prefix="/table-layout", tags=["Table Layout"])


# Layout generation
@router.post("/preview", response_model=LayoutResponse)
async def preview_layout(request: LayoutRequest, db: Session = Depends(get_db)):
    """Show the numbers and positions a configure call would produce"""
    return await layout_service.preview_layout(db, request)


@router.post("/configure", response_model=LayoutResponse)
async def configure_tables(request: LayoutRequest, db: Session = Depends(get_db)):
    """
    Regenerate tables on the requested floors.

    Each floor is replaced in its own transaction. If a later floor fails,
    floors already processed keep their new tables.
    """
    return await layout_service.configure_tables(db, request)


# Table management
@router.get("/tables", response_model=List[TableResponse])
async def list_tables(
    restaurant_id: int = Query(...),
    floor_plan_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """List tables ordered by table number"""
    return await layout_service.list_tables(db, restaurant_id, floor_plan_id)


@router.post("/tables", response_model=TableResponse, status_code=201)
async def create_table(
    table_data: TableCreate,
    restaurant_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """Create one table at a manually chosen position"""
    return await layout_service.create_table(db, restaurant_id, table_data)


@router.get("/tables/{table_id}", response_model=TableResponse)
async def get_table(table_id: int, db: Session = Depends(get_db)):
    return await layout_service.get_table(db, table_id)


@router.put("/tables/{table_id}/config", response_model=TableResponse)
async def update_table_config(
    table_id: int, update_data: TableConfigUpdate, db: Session = Depends(get_db)
):
    """Move or resize a table; must stay inside the edge margin and not overlap"""
    return await layout_service.update_table_config(db, table_id, update_data)


@router.post("/tables/{table_id}/reserve", response_model=TableResponse)
async def set_table_reservation(
    table_id: int, data: TableReservationUpdate, db: Session = Depends(get_db)
):
    return await layout_service.set_reservation(
        db, table_id, data.reserved, data.reservation_time
    )


@router.get("/tables/{table_id}/qr-code", response_model=TableQRCodeResponse)
async def get_table_qr_code(table_id: int, db: Session = Depends(get_db)):
    """QR code for printing, as a PNG data URL"""
    return await layout_service.generate_qr_code(db, table_id)


@router.get("/resolve/{restaurant_id}/{table_number}", response_model=TableResponse)
async def resolve_table(
    restaurant_id: int, table_number: int, db: Session = Depends(get_db)
):
    """Look up the table behind a scanned QR code"""
    return await layout_service.resolve_table(db, restaurant_id, table_number)
