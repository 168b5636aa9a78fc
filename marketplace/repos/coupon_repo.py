# marketplace/repos/coupon_repo.py
from sqlalchemy.orm import Session

from marketplace.data.models.coupon import CouponModel, CouponRedemptionModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_coupon_by_id(self, coupon_id: str, for_update: bool = False) -> CouponModel | None:
        if for_update:
            return self.db.get(CouponModel, coupon_id, with_for_update=True, populate_existing=True)
        return self.db.get(CouponModel, coupon_id)

    def add_redemption(self, coupon: CouponModel, user_id: str) -> CouponRedemptionModel:
        redemption = CouponRedemptionModel(coupon_id=coupon.id, user_id=user_id)
        coupon.redemptions.append(redemption)
        self.db.flush()
        return redemption
