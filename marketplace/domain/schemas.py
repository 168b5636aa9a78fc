# marketplace/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from marketplace.domain.order_status import OrderStatus

PaymentMethod = Literal["Credit Card", "UPI", "Cash on Delivery", "UPI QR Payment", "Razorpay"]

GATEWAY_VERIFIED_METHODS = frozenset({"Razorpay"})
PREPAID_METHODS = frozenset({"Credit Card", "UPI QR Payment", "Razorpay"})
# Razorpay: brakujące pola asercji odrzuca PaymentVerifier
TRANSACTION_REQUIRED_METHODS = frozenset({"UPI QR Payment"})


class OrderItemIn(BaseModel):
    """Pozycja koszyka ze snapshotem ceny/nazwy/zdjęcia z chwili dodania."""

    product_id: str = Field(..., min_length=1, description="ID produktu")
    name: str = Field(..., min_length=1)
    image: str = ""
    price: Decimal = Field(..., gt=0, description="Cena jednostkowa (snapshot)")
    quantity: int = Field(..., ge=1, description="Ilosc (musi byc >= 1)")
    unit: str = Field(..., min_length=1)


class ShippingAddress(BaseModel):
    house_no: str = Field(..., min_length=1)
    landmark: str = ""
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pin_code: str = Field(..., pattern=r"^\d{6}$", description="6-cyfrowy kod pocztowy")
    mobile: str = Field(..., pattern=r"^\+?\d{10,15}$")


class AppliedCouponIn(BaseModel):
    """Snapshot kuponu wyliczony po stronie klienta (kwota rabatu jest zaufana)."""

    id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    discount_amount: Decimal = Field(..., ge=0)
    discount_type: Optional[Literal["percentage", "fixed"]] = None
    discount_value: Optional[Decimal] = Field(None, ge=0)


class OrderCreate(BaseModel):
    """Schema dla składania zamówienia."""

    items: List[OrderItemIn] = Field(..., min_length=1)
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    total_price: Decimal = Field(..., ge=0)
    applied_coupon: Optional[AppliedCouponIn] = None

    # asercja bramki płatności
    transaction_id: Optional[str] = None
    gateway_order_id: Optional[str] = None
    gateway_signature: Optional[str] = None


class OrderItemOut(BaseModel):
    product_id: str
    name: str
    image: str
    price: Decimal
    quantity: int
    unit: str

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamówienia (response)."""

    id: str
    user_id: str
    customer_name: str
    customer_email: str
    store_id: str
    store_name: str
    items: List[OrderItemOut]
    shipping_address: ShippingAddress
    payment_method: str
    total_price: Decimal
    delivery_otp: str
    transaction_id: Optional[str] = None
    gateway_order_id: Optional[str] = None
    coupon_code: Optional[str] = None
    coupon_discount_amount: Optional[Decimal] = None
    coupon_discount_type: Optional[str] = None
    coupon_discount_value: Optional[Decimal] = None
    status: OrderStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class DeliveryConfirm(BaseModel):
    otp: str = Field(..., pattern=r"^\d{6}$", description="6-cyfrowy kod dostawy")


class PaymentOut(BaseModel):
    id: str
    order_id: str
    vendor_id: str
    customer_id: str
    amount: Decimal
    payment_method: str
    transaction_id: str
    gateway_order_id: Optional[str] = None
    status: str
    payment_date: datetime

    model_config = ConfigDict(from_attributes=True)


class GatewayOrderCreate(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Kwota w jednostkach glownych (np. INR)")
    currency: Literal["INR", "USD"] = "INR"


class GatewayOrderOut(BaseModel):
    order_id: str
    currency: str
    amount: Decimal


class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: Literal["customer", "vendor", "admin"] = "customer"


class UserRead(BaseModel):
    id: str
    name: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)
