# marketplace/domain/order_status.py
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


TERMINAL = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED})

# ścieżka szczęśliwa, Delivered tylko przez potwierdzenie kodem OTP
_FORWARD = {
    OrderStatus.PENDING: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}


def can_transition(current: OrderStatus, target: OrderStatus, otp_confirmed: bool = False) -> bool:
    if current in TERMINAL:
        return False
    if target in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
        return True
    if target == OrderStatus.DELIVERED:
        return otp_confirmed
    return _FORWARD.get(current) == target
