from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from ..enums.order_enums import OrderStatus
from ..enums.payment_enums import PaymentMethod, PaymentStatus


class CartItem(BaseModel):
    menu_item_id: int
    quantity: int = Field(1, ge=1)


class OrderCreate(BaseModel):
    table_id: int
    user_id: Optional[int] = None


class OrderFromCart(BaseModel):
    table_id: int
    user_id: Optional[int] = None
    items: List[CartItem]


class OrderItemCreate(BaseModel):
    menu_item_id: int
    quantity: int = Field(1, ge=1)


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    menu_item_id: int
    quantity: int
    price: int
    created_at: datetime

    class Config:
        from_attributes = True


class PaymentOut(BaseModel):
    id: int
    order_id: int
    amount: int
    status: PaymentStatus
    method: Optional[PaymentMethod] = None
    payment_url: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    restaurant_id: int
    table_id: Optional[int] = None
    user_id: Optional[int] = None
    status: OrderStatus
    total_amount: int
    created_at: datetime
    order_items: List[OrderItemOut] = []

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderTransitionOut(BaseModel):
    order: OrderOut
    payment: Optional[PaymentOut] = None


class ProcessPaymentRequest(BaseModel):
    method: PaymentMethod


class DashboardStatsOut(BaseModel):
    active_orders: int
    completed_orders: int
    occupied_tables: int
    total_tables: int
    todays_revenue: int

    class Config:
        from_attributes = True
