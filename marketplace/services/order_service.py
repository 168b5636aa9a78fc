# marketplace/services/order_service.py
import hmac
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from marketplace.data.models.order import OrderModel
from marketplace.data.models.user import UserModel
from marketplace.data.unit_of_work import UnitOfWork
from marketplace.domain.errors import (
    InvalidDeliveryCode,
    InvalidStatusTransition,
    MarketplaceError,
    MultiStoreCartRejected,
    OrderNotFound,
    ProductNotFound,
    ServiceAreaMismatch,
    StoreNotFound,
    TransactionAborted,
    ValidationError,
)
from marketplace.domain.order_status import OrderStatus, can_transition
from marketplace.domain.pricing import expected_total, to_money
from marketplace.domain.schemas import (
    GATEWAY_VERIFIED_METHODS,
    TRANSACTION_REQUIRED_METHODS,
    OrderCreate,
    OrderOut,
    PaymentOut,
)
from marketplace.repos.catalog_repo import CatalogRepo
from marketplace.repos.order_repo import OrderRepo
from marketplace.repos.payment_repo import PaymentRepo
from marketplace.repos.user_repo import UserRepo
from marketplace.services.coupon_service import CouponRedeemer
from marketplace.services.inventory_service import InventoryLedger
from marketplace.services.notification_service import NotificationService, render_order_confirmation
from marketplace.services.order_assembler import OrderAssembler, generate_delivery_otp
from marketplace.services.payment_recorder import PaymentRecorder
from marketplace.services.payment_verifier import PaymentVerifier
from marketplace.utils.settings import RAZORPAY_KEY_SECRET
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.

    place_order to jedna atomowa jednostka pracy: weryfikacja płatności,
    walidacja sklepu/kodu pocztowego/stanów, zdjęcie stanów, zamówienie,
    płatność i kupon - albo wszystko, albo nic. Powiadomienie idzie po commicie.
    """

    def __init__(
        self,
        db: Session,
        verifier: Optional[PaymentVerifier] = None,
        notifier=None,
        otp_factory: Callable[[], str] = generate_delivery_otp,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.catalog = CatalogRepo(db)
        self.users = UserRepo(db)
        self.payments = PaymentRepo(db)

        self.verifier = verifier or PaymentVerifier(RAZORPAY_KEY_SECRET)
        self.notifier = notifier or NotificationService()

        self.inventory = InventoryLedger(db)
        self.assembler = OrderAssembler(db, otp_factory=otp_factory)
        self.recorder = PaymentRecorder(db)
        self.coupons = CouponRedeemer(db)

    # =====================================================
    # COMMANDS
    # =====================================================
    def place_order(self, customer_id: str, payload: OrderCreate) -> OrderOut:
        """
        Use Case: Złożenie zamówienia z koszyka.

        Błędy domenowe lecą do wywołującego bez zmian, każdy inny wyjątek
        w trakcie transakcji jest logowany i zamieniany na TransactionAborted.
        """
        customer = self._validate_request(customer_id, payload)

        try:
            with UnitOfWork(self.db):
                order = self._place(customer, payload)
        except MarketplaceError as e:
            logger.info(f"Order placement rejected for user {customer_id}: {e.code} - {e.message}")
            raise
        except Exception:
            logger.exception(f"Transaction aborted while placing order for user {customer_id}")
            raise TransactionAborted()

        logger.info(f"Order {order.id} placed by user {customer_id} in store {order.store_id}")

        # poza transakcją, best effort
        self._send_confirmation(order)

        return OrderOut.model_validate(order)

    def update_status(self, order_id: str, user_id: str, status: OrderStatus) -> OrderOut:
        """
        Use Case: Zmiana statusu przez sprzedawcę (lub admina).
        Delivered tylko przez confirm_delivery.
        """
        status = OrderStatus(status)

        with UnitOfWork(self.db):
            order = self._get_for_update(order_id)
            self._ensure_can_manage(order, user_id)

            current = OrderStatus(order.status)
            if not can_transition(current, status):
                raise InvalidStatusTransition(current.value, status.value)

            order.status = status.value

            if status == OrderStatus.REFUNDED:
                self._set_payment_status(order.id, "Refunded")

        logger.info(f"Order {order_id} status changed {current.value} -> {status.value} by user {user_id}")
        return OrderOut.model_validate(order)

    def confirm_delivery(self, order_id: str, otp: str, user_id: Optional[str] = None) -> OrderOut:
        """
        Use Case: Potwierdzenie dostawy kodem OTP od klienta.
        Zły kod -> InvalidDeliveryCode, status bez zmian.
        """
        with UnitOfWork(self.db):
            order = self._get_for_update(order_id)
            if user_id is not None:
                self._ensure_can_manage(order, user_id)

            current = OrderStatus(order.status)
            if not can_transition(current, OrderStatus.DELIVERED, otp_confirmed=True):
                raise InvalidStatusTransition(current.value, OrderStatus.DELIVERED.value)

            if not hmac.compare_digest(str(order.delivery_otp).encode(), str(otp).encode()):
                logger.warning(f"Invalid delivery OTP for order {order_id}")
                raise InvalidDeliveryCode()

            order.status = OrderStatus.DELIVERED.value

            # COD opłacone przy odbiorze
            if order.payment_method == "Cash on Delivery":
                self._set_payment_status(order.id, "Paid")

        logger.info(f"Order {order_id} delivered")
        return OrderOut.model_validate(order)

    # =====================================================
    # QUERY
    # =====================================================
    def get_order(self, order_id: str, user_id: str) -> OrderOut:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound(order_id)

        if order.user_id != user_id:
            self._ensure_can_manage(order, user_id)

        return OrderOut.model_validate(order)

    def list_customer_orders(self, user_id: str) -> List[OrderOut]:
        return [OrderOut.model_validate(o) for o in self.repo.list_for_customer(user_id)]

    def list_vendor_orders(self, user_id: str) -> List[OrderOut]:
        stores = self.catalog.find_stores_by_owner(user_id)
        if not stores:
            return []
        return [OrderOut.model_validate(o) for o in self.repo.list_for_stores(s.id for s in stores)]

    def get_payment(self, order_id: str, user_id: str) -> PaymentOut:
        self.get_order(order_id, user_id)
        payment = self.payments.get_by_order(order_id)
        if payment is None:
            raise OrderNotFound(order_id)
        return PaymentOut.model_validate(payment)

    # =====================================================
    # INTERNALS
    # =====================================================
    def _validate_request(self, customer_id: str, payload: OrderCreate) -> UserModel:
        # walidacja na granicy - przed jakąkolwiek mutacją
        if not payload.items:
            raise ValidationError("No items in order.")

        if payload.payment_method in TRANSACTION_REQUIRED_METHODS and not payload.transaction_id:
            raise ValidationError("Transaction ID is required for this payment method.")

        discount = payload.applied_coupon.discount_amount if payload.applied_coupon else None
        expected = expected_total(payload.items, discount)
        if to_money(payload.total_price) != expected:
            raise ValidationError(
                f"Total price {to_money(payload.total_price)} does not match order items ({expected})."
            )

        customer = self.users.get_user(customer_id)
        if not customer:
            raise ValidationError("Customer not found.")
        return customer

    def _place(self, customer: UserModel, payload: OrderCreate) -> OrderModel:
        items = payload.items

        # 1. weryfikacja bramki płatności
        if payload.payment_method in GATEWAY_VERIFIED_METHODS:
            self.verifier.verify(payload.gateway_order_id, payload.transaction_id, payload.gateway_signature)

        # 2. wszystkie produkty jednym zapytaniem
        products = {
            p.id: p
            for p in self.catalog.find_products_by_ids((i.product_id for i in items), for_update=True)
        }
        for item in items:
            if item.product_id not in products:
                raise ProductNotFound(item.product_id)

        # 3. sklep z pierwszej pozycji
        store_id = products[items[0].product_id].store_id
        store = self.catalog.find_store_by_id(store_id)
        if not store or not store.is_active:
            raise StoreNotFound(store_id)

        # 4. jeden sklep na zamówienie
        if any(products[i.product_id].store_id != store.id for i in items):
            raise MultiStoreCartRejected()

        # 5. dostawa lokalna - ten sam kod pocztowy
        if payload.shipping_address.pin_code != store.pin_code:
            raise ServiceAreaMismatch(payload.shipping_address.pin_code, store.pin_code)

        # 6. cały koszyk zwalidowany zanim cokolwiek zdejmiemy
        quantities = self.inventory.ensure_available(products, items)
        coupon = self.coupons.find(payload.applied_coupon.id) if payload.applied_coupon else None

        # 7. zdjęcie stanów
        for product_id, quantity in quantities.items():
            self.inventory.decrement(product_id, quantity)

        # 8. zamówienie
        order = self.assembler.assemble(customer, store, payload, coupon=coupon)

        # 9. płatność 1:1 z zamówieniem
        self.recorder.record(order, vendor_id=store.owner_id)

        # 10. kupon
        if coupon is not None:
            self.coupons.redeem(coupon.id, customer.id)

        return order

    def _send_confirmation(self, order: OrderModel) -> None:
        try:
            self.notifier.send(
                order.customer_email,
                f"BazzarNet Order Confirmation #{order.id}",
                render_order_confirmation(order),
            )
        except Exception as e:
            # zamówienie już zacommitowane, błąd maila tylko logujemy
            logger.error(f"Error sending order confirmation email for order {order.id}: {e}")

    def _get_for_update(self, order_id: str) -> OrderModel:
        order = self.repo.get_order(order_id, for_update=True)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def _ensure_can_manage(self, order: OrderModel, user_id: str) -> None:
        store = self.catalog.find_store_by_id(order.store_id)
        if store is not None and store.owner_id == user_id:
            return
        user = self.users.get_user(user_id)
        if user is not None and user.role == "admin":
            return
        raise PermissionError("Not authorized to access this order")

    def _set_payment_status(self, order_id: str, status: str) -> None:
        payment = self.payments.get_by_order(order_id)
        if payment is not None:
            payment.status = status
