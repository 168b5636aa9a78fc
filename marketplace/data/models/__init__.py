#import wszystkich modeli żeby SQLAlchemy je zarejestrował w base metadata

from marketplace.data.models.user import UserModel
from marketplace.data.models.store import StoreModel
from marketplace.data.models.product import ProductModel
from marketplace.data.models.coupon import CouponModel, CouponRedemptionModel
from marketplace.data.models.order import OrderModel
from marketplace.data.models.order_item import OrderItemModel
from marketplace.data.models.payment import PaymentModel

__all__ = [
    "UserModel",
    "StoreModel",
    "ProductModel",
    "CouponModel",
    "CouponRedemptionModel",
    "OrderModel",
    "OrderItemModel",
    "PaymentModel",
]
