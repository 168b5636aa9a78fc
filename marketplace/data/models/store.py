from sqlalchemy import Boolean, Column, ForeignKey, String

from marketplace.data.database import Base
from marketplace.data.models._ids import new_id


class StoreModel(Base):
    __tablename__ = "stores"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)

    street = Column(String, nullable=False, default="")
    city = Column(String, nullable=False, default="")
    state = Column(String, nullable=False, default="")
    pin_code = Column(String(6), nullable=False)

    is_active = Column(Boolean, nullable=False, default=True)
