from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from marketplace.data.database import Base
from marketplace.data.models._ids import new_id


class CouponModel(Base):
    __tablename__ = "coupons"

    id = Column(String(36), primary_key=True, default=new_id)
    code = Column(String(40), nullable=False, unique=True)

    discount_type = Column(String(20), nullable=False)  # percentage, fixed
    discount_value = Column(Numeric(10, 2), nullable=False)
    used_count = Column(Integer, nullable=False, default=0)

    redemptions = relationship(
        "CouponRedemptionModel",
        back_populates="coupon",
        cascade="all, delete-orphan",
        order_by="CouponRedemptionModel.redeemed_at",
    )

    @property
    def used_by(self) -> list[str]:
        return [r.user_id for r in self.redemptions]


class CouponRedemptionModel(Base):
    __tablename__ = "coupon_redemptions"

    id = Column(String(36), primary_key=True, default=new_id)
    coupon_id = Column(String(36), ForeignKey("coupons.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    redeemed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    coupon = relationship("CouponModel", back_populates="redemptions")
