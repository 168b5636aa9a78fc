# marketplace/data/seed.py
from decimal import Decimal

from marketplace.data.database import SessionLocal, init_db
from marketplace.data.models import CouponModel, ProductModel, StoreModel, UserModel
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def seed():
    init_db()
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(StoreModel).first():
            return

        vendor = UserModel(name="Ravi Kumar", email="vendor@bazzarnet.local", role="vendor")
        customer = UserModel(name="Asha Rao", email="customer@bazzarnet.local", role="customer")
        db.add_all([vendor, customer])
        db.flush()

        store = StoreModel(
            owner_id=vendor.id,
            name="Fresh Basket",
            street="12 MG Road",
            city="Bengaluru",
            state="Karnataka",
            pin_code="560001",
        )
        db.add(store)
        db.flush()

        db.add_all(
            [
                ProductModel(store_id=store.id, name="Bananas", price=Decimal("40.00"), unit="dozen", stock=200),
                ProductModel(store_id=store.id, name="Milk", price=Decimal("28.50"), unit="1L", stock=120),
                ProductModel(store_id=store.id, name="Brown Bread", price=Decimal("45.00"), unit="pack", stock=60),
            ]
        )
        db.add(CouponModel(code="WELCOME50", discount_type="fixed", discount_value=Decimal("50.00")))
        db.commit()
        logger.info(f"Seeded store {store.id} with vendor {vendor.id} and customer {customer.id}")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
