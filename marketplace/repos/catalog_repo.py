# marketplace/repos/catalog_repo.py
from typing import Iterable, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from marketplace.data.models.product import ProductModel
from marketplace.data.models.store import StoreModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_products_by_ids(self, product_ids: Iterable[str], for_update: bool = False) -> List[ProductModel]:
        # jedno zapytanie zamiast N+1
        stmt = select(ProductModel).where(ProductModel.id.in_(set(product_ids))).order_by(ProductModel.id)
        if for_update:
            # blokady zawsze w kolejności id, bez deadlocków między zamówieniami
            # blokada wierszy do końca transakcji (postgres), sqlite ignoruje
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return list(self.db.execute(stmt).scalars().all())

    def find_store_by_id(self, store_id: str) -> StoreModel | None:
        return self.db.get(StoreModel, store_id)

    def find_stores_by_owner(self, owner_id: str) -> List[StoreModel]:
        return list(
            self.db.execute(select(StoreModel).where(StoreModel.owner_id == owner_id)).scalars().all()
        )

    def decrement_stock(self, product_id: str, quantity: int) -> int:
        """
        Warunkowy update: update products set stock = stock - q where id = :id and stock >= q.
        Zwraca rowcount, 0 oznacza, że ktoś inny zdążył zejść poniżej q.
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def current_stock(self, product_id: str):
        # świeży odczyt z bazy z pominięciem identity map
        return self.db.execute(
            select(ProductModel.name, ProductModel.stock).where(ProductModel.id == product_id)
        ).one_or_none()
