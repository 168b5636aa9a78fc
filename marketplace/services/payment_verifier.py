# marketplace/services/payment_verifier.py
import hashlib
import hmac

from marketplace.domain.errors import PaymentVerificationFailed
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentVerifier:
    """
    Weryfikacja asercji płatności z bramki (Razorpay).

    signature = hex(HMAC-SHA256(secret, "<gateway_order_id>|<transaction_id>"))
    Czysta funkcja, bez I/O - odrzuca zanim cokolwiek zostanie zmienione w bazie.
    """

    def __init__(self, secret: str):
        self._secret = secret or ""

    def expected_signature(self, gateway_order_id: str, transaction_id: str) -> str:
        message = f"{gateway_order_id}|{transaction_id}".encode("utf-8")
        return hmac.new(self._secret.encode("utf-8"), message, hashlib.sha256).hexdigest()

    def verify(self, gateway_order_id: str | None, transaction_id: str | None, signature: str | None) -> None:
        if not gateway_order_id or not transaction_id or not signature:
            raise PaymentVerificationFailed("Razorpay payment details are missing for verification.")

        if not self._secret:
            logger.error("Payment verification requested but no gateway secret is configured")
            raise PaymentVerificationFailed("Payment gateway is not configured.")

        expected = self.expected_signature(gateway_order_id, transaction_id)
        if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
            logger.warning(f"Signature mismatch for gateway order {gateway_order_id}")
            raise PaymentVerificationFailed("Invalid signature.")

        logger.info(f"Gateway payment {transaction_id} verified for gateway order {gateway_order_id}")
