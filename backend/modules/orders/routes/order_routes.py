from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from core.database import get_db
from ..controllers.order_controller import (
    create_order, create_order_from_cart, add_order_item, get_order_by_id,
    list_orders, get_table_active_order, transition_order, process_payment,
    get_order_payment, get_stats
)
from ..schemas.order_schemas import (
    OrderCreate, OrderFromCart, OrderItemCreate, OrderOut, OrderStatusUpdate,
    OrderTransitionOut, ProcessPaymentRequest, PaymentOut, DashboardStatsOut
)
from ..enums.order_enums import OrderStatus

router = APIRouter(prefix="/orders", tags=["Orders"])
table_router = APIRouter(prefix="/tables", tags=["Orders"])
admin_router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/", response_model=List[OrderOut])
async def get_orders(
    restaurant_id: Optional[int] = Query(
        None, description="Filter by restaurant"
    ),
    status: Optional[OrderStatus] = Query(
        None, description="Filter by order status"
    ),
    table_id: Optional[int] = Query(None, description="Filter by table ID"),
    limit: int = Query(
        100, ge=1, le=1000, description="Number of orders to return"
    ),
    offset: int = Query(0, ge=0, description="Number of orders to skip"),
    db: Session = Depends(get_db)
):
    """
    Retrieve orders, newest first.

    - **restaurant_id**: Filter by restaurant
    - **status**: Filter by order status (placed, under_process, ...)
    - **table_id**: Filter by table
    """
    return await list_orders(
        db, restaurant_id=restaurant_id, status=status, table_id=table_id,
        limit=limit, offset=offset
    )


@router.post("/", response_model=OrderOut,
             status_code=status.HTTP_201_CREATED)
async def place_order(order_data: OrderCreate, db: Session = Depends(get_db)):
    """
    Open an order on a table.

    Fails with 409 and the existing order id if the table already has an
    order that has not been paid.
    """
    return await create_order(order_data, db)


@router.post("/from-cart", response_model=OrderOut,
             status_code=status.HTTP_201_CREATED)
async def place_order_from_cart(cart: OrderFromCart,
                                db: Session = Depends(get_db)):
    """Place an order together with its items in one step."""
    return await create_order_from_cart(cart, db)


@router.get("/{order_id}", response_model=OrderOut)
async def get_order(order_id: int, db: Session = Depends(get_db)):
    return await get_order_by_id(db, order_id)


@router.post("/{order_id}/items", response_model=OrderOut)
async def add_item(order_id: int, item: OrderItemCreate,
                   db: Session = Depends(get_db)):
    """Add an item while the order is placed or under process."""
    return await add_order_item(order_id, item, db)


@router.patch("/{order_id}/status", response_model=OrderTransitionOut)
async def update_status(order_id: int, update: OrderStatusUpdate,
                        db: Session = Depends(get_db)):
    """
    Advance an order to its next status.

    Only the immediate successor is accepted:
    placed -> under_process -> served -> completed -> paid.
    """
    return await transition_order(order_id, update.status, db)


@router.post("/{order_id}/process-payment", response_model=PaymentOut)
async def pay_order(order_id: int, request: ProcessPaymentRequest,
                    db: Session = Depends(get_db)):
    return await process_payment(order_id, request.method, db)


@router.get("/{order_id}/payment", response_model=PaymentOut)
async def get_payment(order_id: int, db: Session = Depends(get_db)):
    return await get_order_payment(order_id, db)


@table_router.get("/{table_id}/active-order",
                  response_model=Optional[OrderOut])
async def get_active_order(table_id: int, db: Session = Depends(get_db)):
    """The table's unpaid order, or null when the table is free."""
    return await get_table_active_order(db, table_id)


@admin_router.get("/stats", response_model=DashboardStatsOut)
async def get_dashboard_stats(restaurant_id: int = Query(...),
                              db: Session = Depends(get_db)):
    return await get_stats(restaurant_id, db)
