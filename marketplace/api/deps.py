# marketplace/api/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session

from marketplace.data.database import get_db
from marketplace.services.gateway_client import GatewayClient
from marketplace.services.notification_service import NotificationService
from marketplace.services.order_service import OrderService
from marketplace.services.payment_verifier import PaymentVerifier
from marketplace.utils.settings import RAZORPAY_KEY_SECRET


def get_verifier() -> PaymentVerifier:
    return PaymentVerifier(RAZORPAY_KEY_SECRET)


def get_notifier() -> NotificationService:
    return NotificationService()


def get_gateway_client() -> GatewayClient:
    return GatewayClient()


def get_order_service(
    db: Session = Depends(get_db),
    verifier: PaymentVerifier = Depends(get_verifier),
    notifier: NotificationService = Depends(get_notifier),
) -> OrderService:
    return OrderService(db, verifier=verifier, notifier=notifier)
