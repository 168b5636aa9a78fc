from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from marketplace.data.database import Base
from marketplace.data.models._ids import new_id


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_id)

    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)

    store_id = Column(String(36), ForeignKey("stores.id"), nullable=False, index=True)
    store_name = Column(String, nullable=False)

    shipping_address = Column(JSON, nullable=False)
    payment_method = Column(String(30), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)
    delivery_otp = Column(String(6), nullable=False)

    transaction_id = Column(String, nullable=True)
    gateway_order_id = Column(String, nullable=True)
    gateway_signature = Column(String, nullable=True)

    # snapshot kuponu z momentu zamówienia
    coupon_code = Column(String(40), nullable=True)
    coupon_discount_amount = Column(Numeric(10, 2), nullable=True)
    coupon_discount_type = Column(String(20), nullable=True)
    coupon_discount_value = Column(Numeric(10, 2), nullable=True)

    status = Column(String(20), nullable=False, default="Pending")  # Pending, Processing, Shipped, Delivered, Cancelled, Refunded
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
