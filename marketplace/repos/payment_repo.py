# marketplace/repos/payment_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.flush()
        return payment

    def get_by_order(self, order_id: str) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.order_id == order_id)
        ).scalar_one_or_none()

    def get_by_transaction_id(self, transaction_id: str) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.transaction_id == transaction_id)
        ).scalar_one_or_none()
