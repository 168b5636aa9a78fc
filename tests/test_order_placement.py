"""Tests for the order placement transaction."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from marketplace.data.models import CouponModel, OrderModel, PaymentModel, ProductModel, StoreModel
from marketplace.domain.errors import (
    DuplicateTransaction,
    InsufficientStock,
    MultiStoreCartRejected,
    PaymentVerificationFailed,
    ProductNotFound,
    ServiceAreaMismatch,
    StoreNotFound,
    TransactionAborted,
    ValidationError,
)
from marketplace.services.inventory_service import InventoryLedger
from marketplace.services.order_service import OrderService

from conftest import DELIVERY_OTP, FailingNotifier


def stock_of(db, product_id):
    return db.get(ProductModel, product_id).stock


def count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def assert_nothing_written(db, catalog, apples=10, milk=5):
    db.expire_all()
    assert stock_of(db, catalog.apples_id) == apples
    assert stock_of(db, catalog.milk_id) == milk
    assert count(db, OrderModel) == 0
    assert count(db, PaymentModel) == 0


class TestHappyPath:
    def test_places_order_and_decrements_stock(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 3, "100.00"), (catalog.milk_id, 2, "50.00")])

        order = service.place_order(catalog.customer_id, payload)

        assert order.status.value == "Pending"
        assert order.total_price == Decimal("400.00")
        assert order.store_id == catalog.store_id
        assert order.store_name == "Fresh Basket"
        assert order.customer_name == "Asha Rao"
        assert order.delivery_otp == DELIVERY_OTP
        assert [i.quantity for i in order.items] == [3, 2]
        assert stock_of(db, catalog.apples_id) == 7
        assert stock_of(db, catalog.milk_id) == 3

    def test_repeated_product_lines_are_summed(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 4, "100.00"), (catalog.apples_id, 6, "100.00")])

        service.place_order(catalog.customer_id, payload)

        assert stock_of(db, catalog.apples_id) == 0

    def test_exactly_one_payment_per_order(self, db, service, catalog, order_payload):
        order = service.place_order(catalog.customer_id, order_payload([(catalog.apples_id, 1, "100.00")]))

        payments = db.execute(select(PaymentModel).where(PaymentModel.order_id == order.id)).scalars().all()
        assert len(payments) == 1
        assert payments[0].vendor_id == catalog.vendor_id
        assert payments[0].customer_id == catalog.customer_id
        assert payments[0].amount == Decimal("100.00")

    def test_cash_on_delivery_payment_is_pending(self, db, service, catalog, order_payload):
        order = service.place_order(catalog.customer_id, order_payload([(catalog.apples_id, 1, "100.00")]))

        payment = db.execute(select(PaymentModel).where(PaymentModel.order_id == order.id)).scalar_one()
        assert payment.status == "Pending"
        assert payment.transaction_id == f"COD-{order.id}"
        assert order.transaction_id == payment.transaction_id

    def test_card_payment_is_paid(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 1, "100.00")], payment_method="Credit Card")

        order = service.place_order(catalog.customer_id, payload)

        payment = db.execute(select(PaymentModel).where(PaymentModel.order_id == order.id)).scalar_one()
        assert payment.status == "Paid"
        assert payment.transaction_id == f"TXN-{order.id}"

    def test_upi_qr_uses_client_transaction_id(self, db, service, catalog, order_payload):
        payload = order_payload(
            [(catalog.apples_id, 1, "100.00")], payment_method="UPI QR Payment", transaction_id="UPI-98765"
        )

        order = service.place_order(catalog.customer_id, payload)

        payment = db.execute(select(PaymentModel).where(PaymentModel.order_id == order.id)).scalar_one()
        assert payment.transaction_id == "UPI-98765"
        assert payment.status == "Paid"

    def test_line_items_are_a_price_snapshot(self, db, service, catalog, order_payload):
        order = service.place_order(catalog.customer_id, order_payload([(catalog.apples_id, 2, "100.00")]))

        db.get(ProductModel, catalog.apples_id).price = Decimal("999.00")
        db.commit()

        stored = db.get(OrderModel, order.id)
        assert stored.items[0].price == Decimal("100.00")
        assert stored.total_price == Decimal("200.00")

    def test_confirmation_sent_after_commit(self, service, catalog, notifier, order_payload):
        order = service.place_order(catalog.customer_id, order_payload([(catalog.apples_id, 1, "100.00")]))

        assert len(notifier.sent) == 1
        recipient, subject, html = notifier.sent[0]
        assert recipient == "asha@example.com"
        assert order.id in subject
        assert DELIVERY_OTP in html

    def test_notification_failure_does_not_fail_order(self, db, verifier, catalog, order_payload):
        svc = OrderService(db, verifier=verifier, notifier=FailingNotifier())

        order = svc.place_order(catalog.customer_id, order_payload([(catalog.apples_id, 1, "100.00")]))

        assert db.get(OrderModel, order.id) is not None
        assert len(order.delivery_otp) == 6
        assert order.delivery_otp.isdigit()


class TestCoupon:
    def coupon(self, catalog, amount="20.00"):
        return {
            "id": catalog.coupon_id,
            "code": "SAVE20",
            "discount_amount": amount,
            "discount_type": "fixed",
            "discount_value": "20.00",
        }

    def test_coupon_redeemed_once(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 1, "100.00")], coupon=self.coupon(catalog))

        order = service.place_order(catalog.customer_id, payload)

        coupon = db.get(CouponModel, catalog.coupon_id)
        assert coupon.used_count == 1
        assert coupon.used_by == [catalog.customer_id]
        assert order.total_price == Decimal("80.00")
        assert order.coupon_code == "SAVE20"
        assert order.coupon_discount_amount == Decimal("20.00")

    def test_unknown_coupon_rejected_without_mutation(self, db, service, catalog, order_payload):
        coupon = dict(self.coupon(catalog), id="missing-coupon")
        payload = order_payload([(catalog.apples_id, 1, "100.00")], coupon=coupon)

        with pytest.raises(ValidationError):
            service.place_order(catalog.customer_id, payload)

        assert_nothing_written(db, catalog)

    def test_total_must_match_subtotal_minus_discount(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 1, "100.00")], coupon=self.coupon(catalog), total="100.00")

        with pytest.raises(ValidationError):
            service.place_order(catalog.customer_id, payload)

        assert_nothing_written(db, catalog)
        assert db.get(CouponModel, catalog.coupon_id).used_count == 0

    def test_snapshot_taken_from_stored_coupon(self, db, service, catalog, order_payload):
        coupon = dict(self.coupon(catalog), code="WRONGCODE", discount_type="percentage", discount_value="99")
        payload = order_payload([(catalog.apples_id, 1, "100.00")], coupon=coupon)

        order = service.place_order(catalog.customer_id, payload)

        assert order.coupon_code == "SAVE20"
        assert order.coupon_discount_type == "fixed"
        assert order.coupon_discount_value == Decimal("20.00")
        assert order.coupon_discount_amount == Decimal("20.00")
        stored = db.get(OrderModel, order.id)
        assert stored.coupon_code == "SAVE20"


class TestRejections:
    def test_multi_store_cart_rejected(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 1, "100.00"), (catalog.bread_id, 1, "40.00")])

        with pytest.raises(MultiStoreCartRejected):
            service.place_order(catalog.customer_id, payload)

        assert_nothing_written(db, catalog)
        assert stock_of(db, catalog.bread_id) == 20

    def test_service_area_mismatch(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.bread_id, 1, "40.00")], pin_code="560001")

        with pytest.raises(ServiceAreaMismatch) as exc:
            service.place_order(catalog.customer_id, payload)

        assert "560002" in exc.value.message
        assert stock_of(db, catalog.bread_id) == 20

    def test_unknown_product(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 1, "100.00"), ("no-such-product", 1, "10.00")])

        with pytest.raises(ProductNotFound) as exc:
            service.place_order(catalog.customer_id, payload)

        assert exc.value.product_id == "no-such-product"
        assert_nothing_written(db, catalog)

    def test_inactive_store(self, db, service, catalog, order_payload):
        db.get(StoreModel, catalog.store_id).is_active = False
        db.commit()

        with pytest.raises(StoreNotFound):
            service.place_order(catalog.customer_id, order_payload([(catalog.apples_id, 1, "100.00")]))

        assert_nothing_written(db, catalog)

    def test_insufficient_stock_leaves_other_lines_untouched(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 2, "100.00"), (catalog.milk_id, 6, "50.00")])

        with pytest.raises(InsufficientStock) as exc:
            service.place_order(catalog.customer_id, payload)

        assert exc.value.product_id == catalog.milk_id
        assert exc.value.available == 5
        assert exc.value.requested == 6
        assert_nothing_written(db, catalog)

    def test_upi_qr_requires_transaction_id(self, db, service, catalog, order_payload):
        payload = order_payload([(catalog.apples_id, 1, "100.00")], payment_method="UPI QR Payment")

        with pytest.raises(ValidationError):
            service.place_order(catalog.customer_id, payload)

        assert_nothing_written(db, catalog)

    def test_transaction_id_reused_across_orders(self, db, service, catalog, order_payload):
        upi = {"payment_method": "UPI QR Payment", "transaction_id": "UPI-REF-1"}
        first = order_payload([(catalog.apples_id, 1, "100.00")], **upi)
        second = order_payload([(catalog.milk_id, 2, "50.00")], **upi)
        service.place_order(catalog.customer_id, first)

        with pytest.raises(DuplicateTransaction) as exc:
            service.place_order(catalog.customer_id, second)

        assert exc.value.status_code == 409
        assert exc.value.transaction_id == "UPI-REF-1"
        db.expire_all()
        assert stock_of(db, catalog.apples_id) == 9
        assert stock_of(db, catalog.milk_id) == 5
        assert count(db, OrderModel) == 1
        assert count(db, PaymentModel) == 1

    def test_unknown_customer(self, db, service, catalog, order_payload):
        with pytest.raises(ValidationError):
            service.place_order("ghost", order_payload([(catalog.apples_id, 1, "100.00")]))


class TestGatewayVerification:
    def test_valid_signature_accepted(self, db, service, verifier, catalog, order_payload):
        signature = verifier.expected_signature("order_abc", "pay_123")
        payload = order_payload(
            [(catalog.apples_id, 1, "100.00")],
            payment_method="Razorpay",
            transaction_id="pay_123",
            gateway_order_id="order_abc",
            gateway_signature=signature,
        )

        order = service.place_order(catalog.customer_id, payload)

        payment = db.execute(select(PaymentModel).where(PaymentModel.order_id == order.id)).scalar_one()
        assert payment.status == "Paid"
        assert payment.transaction_id == "pay_123"
        assert payment.gateway_order_id == "order_abc"
        assert payment.gateway_signature == signature

    def test_bad_signature_rejected_before_mutation(self, db, service, catalog, order_payload):
        payload = order_payload(
            [(catalog.apples_id, 1, "100.00")],
            payment_method="Razorpay",
            transaction_id="pay_123",
            gateway_order_id="order_abc",
            gateway_signature="deadbeef",
        )

        with pytest.raises(PaymentVerificationFailed):
            service.place_order(catalog.customer_id, payload)

        assert_nothing_written(db, catalog)

    def test_missing_gateway_fields_rejected(self, db, service, catalog, order_payload):
        payload = order_payload(
            [(catalog.apples_id, 1, "100.00")], payment_method="Razorpay", transaction_id="pay_123"
        )

        with pytest.raises(PaymentVerificationFailed):
            service.place_order(catalog.customer_id, payload)

        assert_nothing_written(db, catalog)


class TestRollback:
    def test_payment_failure_rolls_back_stock_and_order(self, db, service, catalog, order_payload, monkeypatch):
        def boom(order, vendor_id):
            raise RuntimeError("disk full")

        monkeypatch.setattr(service.recorder, "record", boom)
        payload = order_payload([(catalog.apples_id, 3, "100.00"), (catalog.milk_id, 1, "50.00")])

        with pytest.raises(TransactionAborted):
            service.place_order(catalog.customer_id, payload)

        assert_nothing_written(db, catalog)

    def test_coupon_failure_rolls_back_everything(self, db, service, catalog, order_payload, monkeypatch):
        def boom(coupon_id, user_id):
            raise RuntimeError("lost connection")

        monkeypatch.setattr(service.coupons, "redeem", boom)
        coupon = {"id": catalog.coupon_id, "code": "SAVE20", "discount_amount": "20.00"}
        payload = order_payload([(catalog.apples_id, 1, "100.00")], coupon=coupon)

        with pytest.raises(TransactionAborted):
            service.place_order(catalog.customer_id, payload)

        assert_nothing_written(db, catalog)
        assert db.get(CouponModel, catalog.coupon_id).used_count == 0

    def test_concurrent_stock_loss_rolls_back_decrements(self, db, service, catalog, order_payload, monkeypatch):
        # walidacja przepuszcza, stan zabiera dopiero warunkowy update
        monkeypatch.setattr(
            service.inventory, "ensure_available", lambda products, lines: InventoryLedger.requested_quantities(lines)
        )
        payload = order_payload([(catalog.apples_id, 3, "100.00"), (catalog.milk_id, 6, "50.00")])

        with pytest.raises(InsufficientStock) as exc:
            service.place_order(catalog.customer_id, payload)

        assert exc.value.product_id == catalog.milk_id
        assert exc.value.available == 5
        assert exc.value.requested == 6
        assert_nothing_written(db, catalog)

    def test_no_notification_when_aborted(self, service, catalog, notifier, order_payload):
        with pytest.raises(InsufficientStock):
            service.place_order(catalog.customer_id, order_payload([(catalog.milk_id, 9, "50.00")]))

        assert notifier.sent == []
