from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String

from marketplace.data.database import Base
from marketplace.data.models._ids import new_id


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=new_id)
    # jedna płatność na zamówienie
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, unique=True)
    vendor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(30), nullable=False)
    transaction_id = Column(String, nullable=False, unique=True)
    gateway_order_id = Column(String, nullable=True)
    gateway_signature = Column(String, nullable=True)

    status = Column(String(20), nullable=False, default="Pending")  # Paid, Pending, Failed, Refunded
    payment_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
