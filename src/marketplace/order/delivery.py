"""Delivery confirmation: the vendor enters the code the customer shows them.

The code is generated at checkout and only ever shown to the ordering
customer. A successful confirmation clears it, so the same code cannot be
used twice.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access import Actor, Capabilities
from marketplace.domain import marketplace
from marketplace.exceptions import MarketplaceError
from marketplace.order.order import Order
from marketplace.order.queries import fetch_order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class ConfirmDelivery:
    order_id = Identifier(required=True)
    code = String()
    confirmed_by = Identifier()


@marketplace.command_handler(part_of=Order)
class ConfirmDeliveryHandler:
    @handle(ConfirmDelivery)
    def confirm_delivery(self, command):
        order = fetch_order(command.order_id)
        order.confirm_delivery(command.code, confirmed_by=command.confirmed_by)
        current_domain.repository_for(Order).add(order)


def confirm_delivery(actor: Actor, order_id, code) -> Order:
    order = fetch_order(order_id)
    capabilities = Capabilities(actor)
    capabilities.require(
        capabilities.can_confirm_delivery(order),
        "Not authorized to confirm delivery for this order",
    )

    try:
        current_domain.process(
            ConfirmDelivery(order_id=str(order.id), code=str(code or ""), confirmed_by=actor.id),
            asynchronous=False,
        )
    except MarketplaceError as exc:
        logger.warning(
            "delivery_confirmation_rejected",
            order_id=str(order.id),
            actor_id=actor.id,
            kind=exc.kind,
        )
        raise

    logger.info("order_delivered", order_id=str(order.id), actor_id=actor.id)
    return fetch_order(order.id)
