from sqlalchemy import Column, String

from marketplace.data.database import Base
from marketplace.data.models._ids import new_id


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    role = Column(String(20), nullable=False, default="customer")  # customer, vendor, admin
