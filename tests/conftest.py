"""Pytest fixtures for marketplace tests."""

import os

# ustawione zanim marketplace.utils.settings zostanie zaimportowane
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RAZORPAY_KEY_SECRET"] = "test_secret"
os.environ["SMTP_HOST"] = ""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from marketplace.data.database import Base, SessionLocal, engine
from marketplace.data.models import CouponModel, ProductModel, StoreModel, UserModel
from marketplace.domain.schemas import OrderCreate
from marketplace.services.order_service import OrderService
from marketplace.services.payment_verifier import PaymentVerifier

GATEWAY_SECRET = "test_secret"
DELIVERY_OTP = "482193"


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send(self, recipient, subject, html_body):
        self.sent.append((recipient, subject, html_body))


class FailingNotifier:
    def send(self, recipient, subject, html_body):
        raise ConnectionError("smtp down")


@pytest.fixture
def db():
    """Fresh in-memory schema per test."""
    import marketplace.data.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def catalog(db):
    """One vendor store at 560001 with two products, a second store at 560002, a customer and a coupon."""
    vendor = UserModel(name="Ravi Kumar", email="vendor@example.com", role="vendor")
    other_vendor = UserModel(name="Meera Shah", email="other@example.com", role="vendor")
    customer = UserModel(name="Asha Rao", email="asha@example.com", role="customer")
    admin = UserModel(name="Admin", email="admin@example.com", role="admin")
    db.add_all([vendor, other_vendor, customer, admin])
    db.flush()

    store = StoreModel(owner_id=vendor.id, name="Fresh Basket", city="Bengaluru", state="Karnataka", pin_code="560001")
    other_store = StoreModel(owner_id=other_vendor.id, name="Daily Needs", city="Bengaluru", state="Karnataka", pin_code="560002")
    db.add_all([store, other_store])
    db.flush()

    apples = ProductModel(store_id=store.id, name="Apples", price=Decimal("100.00"), unit="kg", stock=10)
    milk = ProductModel(store_id=store.id, name="Milk", price=Decimal("50.00"), unit="1L", stock=5)
    bread = ProductModel(store_id=other_store.id, name="Bread", price=Decimal("40.00"), unit="pack", stock=20)
    coupon = CouponModel(code="SAVE20", discount_type="fixed", discount_value=Decimal("20.00"))
    db.add_all([apples, milk, bread, coupon])
    db.commit()

    return SimpleNamespace(
        vendor_id=vendor.id,
        other_vendor_id=other_vendor.id,
        customer_id=customer.id,
        admin_id=admin.id,
        store_id=store.id,
        other_store_id=other_store.id,
        apples_id=apples.id,
        milk_id=milk.id,
        bread_id=bread.id,
        coupon_id=coupon.id,
    )


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def verifier():
    return PaymentVerifier(GATEWAY_SECRET)


@pytest.fixture
def service(db, verifier, notifier):
    return OrderService(db, verifier=verifier, notifier=notifier, otp_factory=lambda: DELIVERY_OTP)


@pytest.fixture
def order_payload():
    """Build an OrderCreate; total is computed from lines minus coupon unless given."""

    def build(lines, pin_code="560001", payment_method="Cash on Delivery", coupon=None, total=None, **extra):
        items = [
            {
                "product_id": product_id,
                "name": f"item-{n}",
                "image": "https://img.example.com/p.png",
                "price": str(price),
                "quantity": quantity,
                "unit": "pc",
            }
            for n, (product_id, quantity, price) in enumerate(lines)
        ]
        if total is None:
            total = sum(Decimal(str(price)) * quantity for _, quantity, price in lines)
            if coupon:
                total -= Decimal(str(coupon["discount_amount"]))
        data = {
            "items": items,
            "shipping_address": {
                "house_no": "42",
                "landmark": "Near Park",
                "city": "Bengaluru",
                "state": "Karnataka",
                "pin_code": pin_code,
                "mobile": "+919876543210",
            },
            "payment_method": payment_method,
            "total_price": str(total),
            "applied_coupon": coupon,
        }
        data.update(extra)
        return OrderCreate.model_validate(data)

    return build
