"""Checkout — freezes a customer's cart into orders.

The handler runs in a single Unit of Work: the orders are written and the
cart is emptied together, or nothing changes at all. Every cart line is
re-resolved against the catalogue first, and one vanished or withdrawn
product fails the whole checkout.

A cart may mix products from several shops. Checkout places one order per
shop, in the order each shop first appears in the cart.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.catalogue.store import get_product
from marketplace.domain import logger, marketplace
from marketplace.order.order import TOTAL_TOLERANCE, Order


@marketplace.command(part_of="Order")
class Checkout:
    customer_id = Identifier(required=True)
    expected_total = Float()  # Client-side total, checked against the server's figure


def price_cart(cart):
    """Resolve every cart line and group the priced lines by shop.

    Returns an insertion-ordered dict of ``shop_id -> [line dict]``.
    """
    lines_by_shop = {}
    for item in cart.ordered_items:
        product = get_product(item.product_id)
        lines_by_shop.setdefault(str(product.shop_id), []).append(
            {
                "product_id": str(product.id),
                "product_name": product.name,
                "quantity": item.quantity,
                "price": round(product.price, 2),
            }
        )
    return lines_by_shop


@marketplace.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_customer(command.customer_id)
        if cart is None or cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        lines_by_shop = price_cart(cart)
        orders = [Order.place(command.customer_id, shop_id, lines) for shop_id, lines in lines_by_shop.items()]
        grand_total = round(sum(order.total for order in orders), 2)

        if command.expected_total is not None and abs(command.expected_total - grand_total) > TOTAL_TOLERANCE:
            raise ValidationError(
                {"total": [f"Submitted total {command.expected_total} does not match the current total {grand_total}"]}
            )

        order_repo = current_domain.repository_for(Order)
        for order in orders:
            order_repo.add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "checkout_completed",
            customer_id=command.customer_id,
            order_ids=[str(order.id) for order in orders],
            total=grand_total,
        )
        return [str(order.id) for order in orders]
