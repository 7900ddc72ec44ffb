"""Order status changes by vendors and admins: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access import Actor, Capabilities
from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.order.queries import fetch_order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    changed_by = Identifier()


@marketplace.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        order = fetch_order(command.order_id)
        order.transition_to(command.status, changed_by=command.changed_by)
        current_domain.repository_for(Order).add(order)


def change_order_status(actor: Actor, order_id, new_status) -> Order:
    """Move an order to ``new_status`` on behalf of ``actor``.

    Customers never change status; vendors only for their own store.
    """
    order = fetch_order(order_id)
    capabilities = Capabilities(actor)
    capabilities.require(
        capabilities.can_transition(order),
        "Not authorized to update the status of this order",
    )

    current_domain.process(
        UpdateOrderStatus(order_id=str(order.id), status=new_status, changed_by=actor.id),
        asynchronous=False,
    )
    logger.info(
        "order_status_changed",
        order_id=str(order.id),
        previous_status=order.status,
        new_status=new_status,
        actor_id=actor.id,
    )
    return fetch_order(order.id)
