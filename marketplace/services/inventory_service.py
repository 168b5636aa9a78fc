# marketplace/services/inventory_service.py
from collections import OrderedDict
from typing import Dict, Iterable

from sqlalchemy.orm import Session

from marketplace.data.models.product import ProductModel
from marketplace.domain.errors import InsufficientStock, ProductNotFound
from marketplace.repos.catalog_repo import CatalogRepo
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryLedger:
    """
    Stany magazynowe produktów.

    ensure_available - walidacja całego koszyka, zanim cokolwiek zostanie zdjęte
    decrement - warunkowy update w bieżącej transakcji (bez commita)
    """

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    @staticmethod
    def requested_quantities(lines: Iterable) -> "OrderedDict[str, int]":
        # ten sam produkt w kilku liniach -> sumujemy
        totals: "OrderedDict[str, int]" = OrderedDict()
        for line in lines:
            totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
        return totals

    def ensure_available(self, products: Dict[str, ProductModel], lines: Iterable) -> "OrderedDict[str, int]":
        totals = self.requested_quantities(lines)
        for product_id, quantity in totals.items():
            product = products[product_id]
            if product.stock < quantity:
                logger.info(
                    f"Insufficient stock for product {product_id}: available {product.stock}, requested {quantity}"
                )
                raise InsufficientStock(product.id, product.name, product.stock, quantity)
        return totals

    def decrement(self, product_id: str, quantity: int) -> None:
        rowcount = self.repo.decrement_stock(product_id, quantity)

        if rowcount == 0:
            row = self.repo.current_stock(product_id)
            if row is None:
                raise ProductNotFound(product_id)
            # konkurencyjna transakcja zdjęła stan między walidacją a update
            logger.warning(f"Stock of product {product_id} changed concurrently, available {row.stock}")
            raise InsufficientStock(product_id, row.name, row.stock, quantity)

        logger.info(f"Stock of product {product_id} decremented by {quantity}")
