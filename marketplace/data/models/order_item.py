from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from marketplace.data.database import Base
from marketplace.data.models._ids import new_id


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # słaba referencja, bez FK - produkt może zniknąć, zamówienie zostaje
    product_id = Column(String(36), nullable=False)

    name = Column(String, nullable=False)
    image = Column(String, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit = Column(String(20), nullable=False)

    order = relationship("OrderModel", back_populates="items")
