"""Read side for orders: single lookups and paginated listings."""

import math
from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from marketplace.config import orders_page_size
from marketplace.exceptions import NotFound
from marketplace.order.order import Order, OrderStatus


@dataclass(frozen=True)
class OrderPage:
    orders: list
    page: int
    pages: int
    total: int


def fetch_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise NotFound(f"Order {order_id} not found", kind="OrderNotFound")


def _matches(order: Order, term: str, fields: tuple[str, ...]) -> bool:
    haystack = [str(getattr(order, field) or "") for field in fields]
    haystack.extend(item.name for item in order.items)
    return any(term in value.lower() for value in haystack)


def _paginate(
    filters: dict,
    page: int = 1,
    limit: int | None = None,
    status=None,
    search: str | None = None,
    search_fields: tuple[str, ...] = ("id",),
) -> OrderPage:
    limit = limit or orders_page_size()
    page = max(1, page)
    if status:
        try:
            filters["status"] = OrderStatus(status).value
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {status}"]})

    query = current_domain.repository_for(Order)._dao.query.filter(**filters).order_by("-created_at")
    term = (search or "").strip().lower()
    if term:
        # Item names live on the child entities, so the match runs in memory
        matched = [order for order in query.limit(None).all().items if _matches(order, term, search_fields)]
        total = len(matched)
        orders = matched[(page - 1) * limit : page * limit]
    else:
        total = query.all().total
        orders = query.offset((page - 1) * limit).limit(limit).all().items
    return OrderPage(orders=orders, page=page, pages=math.ceil(total / limit), total=total)


def orders_for_customer(
    customer_id, page: int = 1, limit: int | None = None, status=None, search: str | None = None
) -> OrderPage:
    """A customer's orders; ``search`` matches the order id or an item name."""
    return _paginate({"customer_id": str(customer_id)}, page=page, limit=limit, status=status, search=search)


def orders_for_store(
    store_id, page: int = 1, limit: int | None = None, status=None, search: str | None = None
) -> OrderPage:
    """A store's orders, newest first, optionally narrowed to one status.

    ``search`` also matches the customer's name and email.
    """
    return _paginate(
        {"store_id": str(store_id)},
        page=page,
        limit=limit,
        status=status,
        search=search,
        search_fields=("id", "customer_name", "customer_email"),
    )
