# marketplace/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def subtotal(items: Iterable) -> Decimal:
    """Suma cen ze snapshotu pozycji (cena z momentu dodania do koszyka)."""
    return to_money(sum((to_money(i.price) * i.quantity for i in items), Decimal("0.00")))


def expected_total(items: Iterable, discount_amount=None) -> Decimal:
    total = subtotal(items) - to_money(discount_amount or 0)
    return max(total, Decimal("0.00"))
