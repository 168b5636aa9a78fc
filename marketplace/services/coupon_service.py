# marketplace/services/coupon_service.py
from sqlalchemy.orm import Session

from marketplace.data.models.coupon import CouponModel
from marketplace.domain.errors import ValidationError
from marketplace.repos.coupon_repo import CouponRepo
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class CouponRedeemer:
    """
    Oznacza kupon jako użyty przez użytkownika.
    Nie jest idempotentny - wywoływany dokładnie raz na udane zamówienie.
    Licznik nigdy nie jest zmniejszany (również przy anulowaniu zamówienia).
    """

    def __init__(self, db: Session):
        self.repo = CouponRepo(db)

    def find(self, coupon_id: str) -> CouponModel:
        coupon = self.repo.find_coupon_by_id(coupon_id, for_update=True)
        if coupon is None:
            raise ValidationError(f"Coupon with ID {coupon_id} not found.")
        return coupon

    def redeem(self, coupon_id: str, user_id: str) -> CouponModel:
        coupon = self.find(coupon_id)
        coupon.used_count = (coupon.used_count or 0) + 1
        self.repo.add_redemption(coupon, user_id)
        logger.info(f"Coupon {coupon.code} redeemed by user {user_id}, used {coupon.used_count} times")
        return coupon
