# marketplace/repos/order_repo.py
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        # bez commita - commit robi jednostka pracy
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: str, for_update: bool = False) -> OrderModel | None:
        if for_update:
            return self.db.get(OrderModel, order_id, with_for_update=True, populate_existing=True)
        return self.db.get(OrderModel, order_id)

    def list_for_customer(self, user_id: str) -> List[OrderModel]:
        stmt = select(OrderModel).where(OrderModel.user_id == user_id).order_by(OrderModel.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_for_stores(self, store_ids: Iterable[str]) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.store_id.in_(list(store_ids)))
            .order_by(OrderModel.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())
