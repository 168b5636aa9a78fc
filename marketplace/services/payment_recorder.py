# marketplace/services/payment_recorder.py
from sqlalchemy.orm import Session

from marketplace.data.models.order import OrderModel
from marketplace.data.models.payment import PaymentModel
from marketplace.domain.errors import DuplicatePayment, DuplicateTransaction
from marketplace.domain.schemas import PREPAID_METHODS
from marketplace.repos.payment_repo import PaymentRepo
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def initial_payment_status(payment_method: str) -> str:
    # karta / QR / bramka są opłacone z góry, reszta (COD, UPI) czeka
    return "Paid" if payment_method in PREPAID_METHODS else "Pending"


class PaymentRecorder:
    def __init__(self, db: Session):
        self.repo = PaymentRepo(db)

    def record(self, order: OrderModel, vendor_id: str) -> PaymentModel:
        if self.repo.get_by_order(order.id) is not None:
            raise DuplicatePayment(order.id)

        # ta sama asercja bramki / referencja UPI nie może opłacić dwóch zamówień
        if self.repo.get_by_transaction_id(order.transaction_id) is not None:
            raise DuplicateTransaction(order.transaction_id)

        payment = PaymentModel(
            order_id=order.id,
            vendor_id=vendor_id,
            customer_id=order.user_id,
            amount=order.total_price,
            payment_method=order.payment_method,
            transaction_id=order.transaction_id,
            gateway_order_id=order.gateway_order_id,
            gateway_signature=order.gateway_signature,
            status=initial_payment_status(order.payment_method),
        )
        created = self.repo.create_payment(payment)
        logger.info(f"Payment {created.id} ({created.status}) recorded for order {order.id}")
        return created
