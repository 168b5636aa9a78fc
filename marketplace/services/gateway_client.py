# marketplace/services/gateway_client.py
import time
from decimal import Decimal

import requests
from requests import RequestException

from marketplace.domain.errors import GatewayUnavailable
from marketplace.utils.retry import http_retry
from marketplace.utils.settings import (
    GATEWAY_TIMEOUT_SECONDS,
    RAZORPAY_API_URL,
    RAZORPAY_KEY_ID,
    RAZORPAY_KEY_SECRET,
)
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class GatewayClient:
    """
    Tworzenie zamówienia po stronie bramki płatności (krok przed checkoutem).
    Wynik jest tylko informacyjny - faktyczna płatność potwierdza PaymentVerifier.
    """

    def __init__(
        self,
        base_url: str | None = None,
        key_id: str | None = None,
        key_secret: str | None = None,
        timeout: int = GATEWAY_TIMEOUT_SECONDS,
    ):
        self.base_url = (base_url or RAZORPAY_API_URL).rstrip("/")
        self.auth = (key_id or RAZORPAY_KEY_ID, key_secret or RAZORPAY_KEY_SECRET)
        self.timeout = timeout

    @http_retry()
    def _post_order(self, body: dict) -> dict:
        url = f"{self.base_url}/orders"
        logger.info(f"GatewayClient POST {url} amount={body['amount']} {body['currency']}")

        resp = requests.post(url, json=body, auth=self.auth, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def create_order(self, amount: Decimal, currency: str = "INR") -> dict:
        body = {
            # kwota w najmniejszej jednostce (paise / cents)
            "amount": int((Decimal(str(amount)) * 100).to_integral_value()),
            "currency": currency,
            "receipt": f"receipt_order_{int(time.time() * 1000)}",
            "payment_capture": 1,
        }
        try:
            data = self._post_order(body)
        except RequestException as e:
            logger.error(f"Error creating gateway order: {e}")
            raise GatewayUnavailable() from e

        return {
            "order_id": data["id"],
            "currency": data["currency"],
            "amount": Decimal(data["amount"]) / 100,
        }
