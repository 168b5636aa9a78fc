# marketplace/services/notification_service.py
import smtplib
from email.message import EmailMessage

from marketplace.celery_worker import celery_app
from marketplace.data.models.order import OrderModel
from marketplace.utils.retry import smtp_retry
from marketplace.utils.settings import (
    FRONTEND_URL,
    MAIL_FROM,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
    SMTP_USER,
)
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania - wywołujący nie czeka na wysyłkę.
    """

    def send(self, recipient: str, subject: str, html_body: str) -> None:
        send_email_task.delay(recipient, subject, html_body)


def render_order_confirmation(order: OrderModel) -> str:
    items_html = "".join(
        f"<li>{i.name} (Qty: {i.quantity} {i.unit}) - ₹{i.price:.2f}</li>" for i in order.items
    )
    address = order.shipping_address or {}
    landmark = f"{address['landmark']}, " if address.get("landmark") else ""
    coupon_html = (
        f"<p><strong>Coupon Applied:</strong> {order.coupon_code} "
        f"(Discount: ₹{order.coupon_discount_amount:.2f})</p>"
        if order.coupon_code
        else ""
    )
    txn_html = f"<p><strong>Transaction ID:</strong> {order.transaction_id}</p>" if order.transaction_id else ""
    track_url = f"{FRONTEND_URL}/my-orders/{order.id}"

    return (
        f"<p>Hello {order.customer_name},</p>"
        f"<p>Thank you for your order from BazzarNet!</p>"
        f"<p>Your order #{order.id} has been placed successfully and is being processed.</p>"
        f"<h3>Order Summary:</h3><ul>{items_html}</ul>"
        f"<p><strong>Total Price:</strong> ₹{order.total_price:.2f}</p>"
        f"{coupon_html}"
        f"<p><strong>Payment Method:</strong> {order.payment_method}</p>"
        f"{txn_html}"
        f"<p><strong>Shipping Address:</strong></p>"
        f"<p>{address.get('house_no', '')}, {landmark}{address.get('city', '')}, "
        f"{address.get('state', '')} - {address.get('pin_code', '')}</p>"
        f"<p>Your delivery OTP is: <strong>{order.delivery_otp}</strong>. "
        f"Please provide this to the delivery person.</p>"
        f'<p>You can track your order status here: <a href="{track_url}">{track_url}</a></p>'
        f"<p>The BazzarNet Team</p>"
    )


@smtp_retry()
def _deliver(recipient: str, subject: str, html_body: str) -> None:
    msg = EmailMessage()
    msg["From"] = MAIL_FROM
    msg["To"] = recipient
    msg["Subject"] = subject
    msg.set_content("Your order has been placed!")
    msg.add_alternative(html_body, subtype="html")

    with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=10) as smtp:
        smtp.starttls()
        if SMTP_USER:
            smtp.login(SMTP_USER, SMTP_PASSWORD)
        smtp.send_message(msg)


@celery_app.task(name="marketplace.services.notification_service.send_email_task")
def send_email_task(recipient: str, subject: str, html_body: str):
    """
    Celery task - wysyła maila przez SMTP.
    Bez skonfigurowanego SMTP_HOST tylko loguje.
    """
    if not SMTP_HOST:
        logger.info(f"[NOTIFICATION] {recipient}: {subject}")
        return {"recipient": recipient, "status": "logged"}

    try:
        _deliver(recipient, subject, html_body)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email to {recipient}: {e}")
        return {"recipient": recipient, "status": "failed"}

    logger.info(f"[NOTIFICATION] Email '{subject}' sent to {recipient}")
    return {"recipient": recipient, "status": "sent"}
