"""Order confirmation email, sent after checkout commits.

Delivery is best effort. A failure is logged and the order stands; nothing
here raises back into checkout.
"""

import structlog

from marketplace.config import frontend_url, mail_sender
from marketplace.notifications import get_mailer
from marketplace.notifications.mailer import EmailMessage

logger = structlog.get_logger(__name__)


def _render(order) -> tuple[str, str, str]:
    tracking_link = f"{frontend_url()}/my-orders/{order.id}"
    greeting = f"Hi {order.customer_name}," if order.customer_name else "Hi,"
    lines = "\n".join(f"  - {item.name} x {item.quantity} @ {item.price:.2f}" for item in order.items)

    subject = f"Your order {order.id} has been placed"
    body = (
        f"{greeting}\n\n"
        f"Thank you for shopping with {order.store_name or 'us'}. Your order has been placed.\n\n"
        f"{lines}\n\n"
        f"Total: {order.total_price:.2f}\n"
        f"Payment method: {order.payment_method}\n\n"
        f"Your delivery code is {order.delivery_code}. Share it with the vendor only when you "
        f"receive your order.\n\n"
        f"Track your order: {tracking_link}\n"
    )
    html_body = (
        f"<p>{greeting}</p>"
        f"<p>Your order has been placed. Total: <strong>{order.total_price:.2f}</strong></p>"
        f"<p>Your delivery code is <strong>{order.delivery_code}</strong>.</p>"
        f'<p><a href="{tracking_link}">Track your order</a></p>'
    )
    return subject, body, html_body


def send_order_confirmation(order) -> dict | None:
    if not order.customer_email:
        logger.info("order_confirmation_skipped", order_id=str(order.id), reason="no email")
        return None

    subject, body, html_body = _render(order)
    try:
        result = get_mailer().send(
            EmailMessage(
                to=order.customer_email,
                subject=subject,
                body=body,
                html_body=html_body,
                sender=mail_sender(),
            )
        )
    except Exception:
        logger.exception("order_confirmation_failed", order_id=str(order.id))
        return None

    if result.get("status") != "sent":
        logger.warning(
            "order_confirmation_not_sent",
            order_id=str(order.id),
            error=result.get("error"),
        )
    else:
        logger.info("order_confirmation_sent", order_id=str(order.id), message_id=result.get("message_id"))
    return result
