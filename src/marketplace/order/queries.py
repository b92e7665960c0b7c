"""Order reads for customers and shop owners."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.identity.model import Identity
from marketplace.order.order import Order
from marketplace.pagination import Page


def visible_order(identity: Identity, order_id: str) -> Order:
    """The order, if ``identity`` placed it or owns the shop fulfilling it.

    Orders the caller may not see are reported as missing.
    """
    order = current_domain.repository_for(Order).get_or_none(order_id)
    if order is None or not (str(order.customer_id) == identity.id or identity.owns_shop(order.shop_id)):
        raise ObjectNotFoundError(f"Order {order_id} not found")
    return order


def customer_orders(customer_id: str, page: int = 1, page_size: int = 10) -> Page:
    return current_domain.repository_for(Order).for_customer(customer_id, page=page, page_size=page_size)


def order_details(order: Order) -> dict:
    return {
        "order_id": str(order.id),
        "customer_id": str(order.customer_id),
        "shop_id": str(order.shop_id),
        "status": order.status,
        "total": order.total,
        "lines": [
            {
                "product_id": str(line.product_id),
                "product_name": line.product_name,
                "quantity": line.quantity,
                "price": line.price,
                "subtotal": line.subtotal,
            }
            for line in order.ordered_lines
        ],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }
