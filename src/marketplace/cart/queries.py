"""Cart reads.

``get_cart`` never fails for a known customer: a customer who has not added
anything yet gets an empty, unsaved cart. ``cart_details`` is the explicit
catalogue join used for display; it reads current prices, so what it shows
can change until the moment of checkout.
"""

from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.catalogue.store import products_by_id


def get_cart(customer_id: str) -> Cart:
    return current_domain.repository_for(Cart).for_customer_or_new(customer_id)


def cart_details(cart: Cart) -> dict:
    items = cart.ordered_items
    products = products_by_id(item.product_id for item in items)

    lines = []
    subtotal = 0.0
    for item in items:
        product = products.get(str(item.product_id))
        if product is not None:
            subtotal += product.price * item.quantity
        lines.append(
            {
                "product_id": str(item.product_id),
                "product": product.summary() if product else None,
                "quantity": item.quantity,
                "available": product is not None,
            }
        )

    return {
        "customer_id": str(cart.customer_id),
        "items": lines,
        "item_count": len(lines),
        "subtotal": round(subtotal, 2),
        "updated_at": cart.updated_at,
    }
