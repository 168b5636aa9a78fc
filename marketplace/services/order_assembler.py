# marketplace/services/order_assembler.py
import secrets
from typing import Callable, Optional

from sqlalchemy.orm import Session

from marketplace.data.models._ids import new_id
from marketplace.data.models.coupon import CouponModel
from marketplace.data.models.order import OrderModel
from marketplace.data.models.order_item import OrderItemModel
from marketplace.data.models.store import StoreModel
from marketplace.data.models.user import UserModel
from marketplace.domain.order_status import OrderStatus
from marketplace.domain.pricing import to_money
from marketplace.domain.schemas import GATEWAY_VERIFIED_METHODS, OrderCreate
from marketplace.repos.order_repo import OrderRepo


def generate_delivery_otp() -> str:
    return f"{secrets.randbelow(900_000) + 100_000}"


def transaction_reference(order_id: str, payment_method: str, transaction_id: Optional[str]) -> str:
    if transaction_id:
        return transaction_id
    if payment_method == "Cash on Delivery":
        return f"COD-{order_id}"
    return f"TXN-{order_id}"


class OrderAssembler:
    """Mapowanie zwalidowanego wejścia na rekord zamówienia + snapshot pozycji."""

    def __init__(self, db: Session, otp_factory: Callable[[], str] = generate_delivery_otp):
        self.repo = OrderRepo(db)
        self.otp_factory = otp_factory

    def assemble(
        self,
        customer: UserModel,
        store: StoreModel,
        payload: OrderCreate,
        coupon: Optional[CouponModel] = None,
    ) -> OrderModel:
        order_id = new_id()
        via_gateway = payload.payment_method in GATEWAY_VERIFIED_METHODS
        # kod i reguła z bazy, kwota rabatu z koszyka klienta
        applied = payload.applied_coupon if coupon is not None else None

        order = OrderModel(
            id=order_id,
            user_id=customer.id,
            customer_name=customer.name,
            customer_email=customer.email,
            store_id=store.id,
            store_name=store.name,
            shipping_address=payload.shipping_address.model_dump(),
            payment_method=payload.payment_method,
            total_price=to_money(payload.total_price),
            delivery_otp=self.otp_factory(),
            transaction_id=transaction_reference(order_id, payload.payment_method, payload.transaction_id),
            gateway_order_id=payload.gateway_order_id if via_gateway else None,
            gateway_signature=payload.gateway_signature if via_gateway else None,
            coupon_code=coupon.code if coupon is not None else None,
            coupon_discount_amount=to_money(applied.discount_amount) if applied else None,
            coupon_discount_type=coupon.discount_type if coupon is not None else None,
            coupon_discount_value=coupon.discount_value if coupon is not None else None,
            status=OrderStatus.PENDING.value,
            items=[
                OrderItemModel(
                    product_id=line.product_id,
                    name=line.name,
                    image=line.image,
                    price=to_money(line.price),
                    quantity=line.quantity,
                    unit=line.unit,
                )
                for line in payload.items
            ],
        )
        return self.repo.create_order(order)
