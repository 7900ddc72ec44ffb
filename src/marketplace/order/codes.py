"""Generated identifiers carried by an order."""

import secrets
from uuid import uuid4

from marketplace.order.order import PaymentMethod


def generate_delivery_code() -> str:
    """A uniformly random six digit code, zero padded."""
    return f"{secrets.randbelow(1_000_000):06d}"


def generate_transaction_id(payment_method) -> str | None:
    """Reference for prepaid orders; cash on delivery has none."""
    if PaymentMethod(payment_method) == PaymentMethod.CASH_ON_DELIVERY:
        return None
    return f"TXN-{uuid4().hex[:12].upper()}"
