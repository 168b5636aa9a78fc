from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String

from marketplace.data.database import Base
from marketplace.data.models._ids import new_id


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    store_id = Column(String(36), ForeignKey("stores.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    image = Column(String, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    unit = Column(String(20), nullable=False, default="pc")
    stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),)
