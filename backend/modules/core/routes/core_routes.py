# backend/modules/core/routes/core_routes.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from core.database import get_db
from modules.tables.schemas.table_schemas import TableResponse
from ..schemas import (
    RestaurantCreate,
    RestaurantUpdate,
    RestaurantResponse,
    FloorPlanCreate,
    FloorPlanUpdate,
    FloorPlanResponse,
    FloorPlanWithTables,
    OperatingHoursCreate,
    OperatingHoursUpdate,
    OperatingHoursResponse,
)
from ..services.core_service import CoreService

restaurant_router = APIRouter(prefix="/restaurants", tags=["Restaurants"])
floor_plan_router = APIRouter(prefix="/floor-plans", tags=["Floor Plans"])
operating_hours_router = APIRouter(prefix="/operating-hours", tags=["Operating Hours"])


@restaurant_router.post("/", response_model=RestaurantResponse, status_code=201)
def create_restaurant(restaurant_data: RestaurantCreate, db: Session = Depends(get_db)):
    return CoreService(db).create_restaurant(restaurant_data)


@restaurant_router.get("/{restaurant_id}", response_model=RestaurantResponse)
def get_restaurant(restaurant_id: int, db: Session = Depends(get_db)):
    return CoreService(db).get_restaurant(restaurant_id)


@restaurant_router.put("/{restaurant_id}", response_model=RestaurantResponse)
def update_restaurant(
    restaurant_id: int, update_data: RestaurantUpdate, db: Session = Depends(get_db)
):
    return CoreService(db).update_restaurant(restaurant_id, update_data)


@floor_plan_router.get("/", response_model=List[FloorPlanResponse])
def list_floor_plans(
    restaurant_id: int = Query(...),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
):
    """Floor plans ordered by floor number"""
    return CoreService(db).get_floor_plans(restaurant_id, include_inactive)


@floor_plan_router.post("/", response_model=FloorPlanResponse, status_code=201)
def create_floor_plan(floor_data: FloorPlanCreate, db: Session = Depends(get_db)):
    return CoreService(db).create_floor_plan(floor_data)


@floor_plan_router.get("/{floor_plan_id}", response_model=FloorPlanResponse)
def get_floor_plan(floor_plan_id: int, db: Session = Depends(get_db)):
    return CoreService(db).get_floor_plan(floor_plan_id)


@floor_plan_router.get("/{floor_plan_id}/with-tables", response_model=FloorPlanWithTables)
def get_floor_plan_with_tables(floor_plan_id: int, db: Session = Depends(get_db)):
    """Floor plan plus its tables and their placements"""
    service = CoreService(db)
    floor_plan = service.get_floor_plan(floor_plan_id)
    tables = [TableResponse.model_validate(t) for t in service.get_floor_plan_tables(floor_plan_id)]
    return FloorPlanWithTables(
        **FloorPlanResponse.model_validate(floor_plan).model_dump(), tables=tables
    )


@floor_plan_router.put("/{floor_plan_id}", response_model=FloorPlanResponse)
def update_floor_plan(
    floor_plan_id: int, update_data: FloorPlanUpdate, db: Session = Depends(get_db)
):
    return CoreService(db).update_floor_plan(floor_plan_id, update_data)


@floor_plan_router.delete("/{floor_plan_id}", status_code=204)
def delete_floor_plan(floor_plan_id: int, db: Session = Depends(get_db)):
    """Delete a floor plan and every table on it"""
    CoreService(db).delete_floor_plan(floor_plan_id)


@operating_hours_router.get("/restaurant/{restaurant_id}", response_model=List[OperatingHoursResponse])
def list_operating_hours(restaurant_id: int, db: Session = Depends(get_db)):
    """Weekly hours ordered by weekday, Sunday first"""
    return CoreService(db).get_operating_hours(restaurant_id)


@operating_hours_router.get("/{hours_id}", response_model=OperatingHoursResponse)
def get_operating_hours(hours_id: int, db: Session = Depends(get_db)):
    return CoreService(db).get_operating_hours_entry(hours_id)


@operating_hours_router.post("/", response_model=OperatingHoursResponse, status_code=201)
def create_operating_hours(hours_data: OperatingHoursCreate, db: Session = Depends(get_db)):
    return CoreService(db).create_operating_hours(hours_data)


@operating_hours_router.put("/{hours_id}", response_model=OperatingHoursResponse)
def update_operating_hours(
    hours_id: int, update_data: OperatingHoursUpdate, db: Session = Depends(get_db)
):
    return CoreService(db).update_operating_hours(hours_id, update_data)


@operating_hours_router.delete("/{hours_id}", status_code=204)
def delete_operating_hours(hours_id: int, db: Session = Depends(get_db)):
    CoreService(db).delete_operating_hours(hours_id)
