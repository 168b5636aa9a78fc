# marketplace/domain/errors.py
"""
Taksonomia błędów domeny zamówień.

Każdy błąd niesie czytelny komunikat, kod maszynowy i status HTTP,
na który router tłumaczy go 1:1.
"""


class MarketplaceError(Exception):
    """Base error for every order-domain failure."""

    code = "MARKETPLACE_ERROR"
    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(MarketplaceError):
    code = "VALIDATION_ERROR"


class DuplicatePayment(ValidationError):
    code = "DUPLICATE_PAYMENT"
    status_code = 409

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"A payment is already recorded for order {order_id}.")


class DuplicateTransaction(ValidationError):
    code = "DUPLICATE_TRANSACTION"
    status_code = 409

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction ID {transaction_id} has already been used for another order.")


class PaymentVerificationFailed(MarketplaceError):
    code = "PAYMENT_VERIFICATION_FAILED"

    def __init__(self, reason: str = "Invalid signature."):
        super().__init__(f"Payment verification failed: {reason}")


class ProductNotFound(MarketplaceError):
    code = "PRODUCT_NOT_FOUND"
    status_code = 404

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found.")


class StoreNotFound(MarketplaceError):
    code = "STORE_NOT_FOUND"
    status_code = 404

    def __init__(self, store_id: str | None = None):
        self.store_id = store_id
        super().__init__("Store not found for the order.")


class MultiStoreCartRejected(MarketplaceError):
    code = "MULTI_STORE_CART"

    def __init__(self):
        super().__init__("Cannot place order with products from multiple stores.")


class ServiceAreaMismatch(MarketplaceError):
    code = "SERVICE_AREA_MISMATCH"

    def __init__(self, requested_pin: str, store_pin: str):
        self.requested_pin = requested_pin
        self.store_pin = store_pin
        super().__init__(
            f"Cannot place order. Store is not available in your selected pincode ({requested_pin}). "
            f"This store serves pincode {store_pin}."
        )


class InsufficientStock(MarketplaceError):
    code = "INSUFFICIENT_STOCK"
    status_code = 409

    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f'Not enough stock for "{product_name}". Available: {available}, requested: {requested}.'
        )


class InvalidDeliveryCode(MarketplaceError):
    code = "INVALID_DELIVERY_CODE"

    def __init__(self):
        super().__init__("Invalid delivery OTP.")


class InvalidStatusTransition(MarketplaceError):
    code = "INVALID_STATUS_TRANSITION"
    status_code = 409

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change order status from {current} to {requested}.")


class OrderNotFound(MarketplaceError):
    code = "ORDER_NOT_FOUND"
    status_code = 404

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__("Order not found.")


class GatewayUnavailable(MarketplaceError):
    code = "GATEWAY_UNAVAILABLE"
    status_code = 502

    def __init__(self):
        super().__init__("Failed to create payment gateway order.")


class TransactionAborted(MarketplaceError):
    code = "TRANSACTION_ABORTED"
    status_code = 500

    def __init__(self):
        super().__init__("Order placement failed due to a transaction error.")
