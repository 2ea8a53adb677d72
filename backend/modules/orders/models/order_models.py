from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime,
                        Index, CheckConstraint, text)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin
from ..enums.order_enums import OrderStatus, ACTIVE_ORDER_STATUSES
from ..enums.payment_enums import PaymentStatus
from datetime import datetime


ACTIVE_STATUS_CLAUSE = "status IN ({})".format(
    ", ".join(f"'{status.value}'" for status in ACTIVE_ORDER_STATUSES)
)


class Order(Base, TimestampMixin):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"),
                           nullable=False, index=True)
    # Nulled when a floor is regenerated; paid history outlives its table.
    table_id = Column(Integer, ForeignKey("tables.id", ondelete="SET NULL"),
                      nullable=True, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    status = Column(String, nullable=False, index=True,
                    default=OrderStatus.PLACED.value)
    # Local server time; "today" in revenue stats is the local calendar day.
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

    order_items = relationship("OrderItem", back_populates="order",
                               order_by="OrderItem.id",
                               cascade="all, delete-orphan")
    payment = relationship("Payment", back_populates="order", uselist=False)
    table = relationship("Table", back_populates="orders")

    __table_args__ = (
        # Storage-level guard for one active order per table.
        Index(
            "uix_orders_active_table",
            "table_id",
            unique=True,
            postgresql_where=text(ACTIVE_STATUS_CLAUSE),
            sqlite_where=text(ACTIVE_STATUS_CLAUSE),
        ),
    )

    @property
    def total_amount(self) -> int:
        return sum(item.price * item.quantity for item in self.order_items)


class OrderItem(Base, TimestampMixin):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"),
                      nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"),
                           nullable=False)
    quantity = Column(Integer, nullable=False)
    # Price captured from the menu item when the item was ordered (minor units)
    price = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="order_items")
    menu_item = relationship("MenuItem")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="chk_order_item_quantity"),
        CheckConstraint("price >= 0", name="chk_order_item_price"),
    )


class Payment(Base, TimestampMixin):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"),
                      nullable=False, unique=True, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id", ondelete="CASCADE"),
                           nullable=False)
    customer_id = Column(Integer, nullable=True)
    amount = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=PaymentStatus.PENDING.value)
    method = Column(String(30), nullable=True)
    payment_url = Column(String(200), nullable=True)
    paid_at = Column(DateTime, nullable=True)

    order = relationship("Order", back_populates="payment")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="chk_payment_amount"),
    )
