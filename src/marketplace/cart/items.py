"""Cart mutations — commands and handler.

Every write that names a product resolves it through the catalogue first, so
a stale product id fails with ``ObjectNotFoundError`` instead of landing in
the cart.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart, validate_quantity
from marketplace.catalogue.store import get_product
from marketplace.domain import logger, marketplace


@marketplace.command(part_of="Cart")
class UpsertCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.command(part_of="Cart")
class RemoveCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class CartItemsHandler:
    @handle(UpsertCartItem)
    def upsert_item(self, command):
        validate_quantity(command.quantity)
        product = get_product(command.product_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.for_customer_or_new(command.customer_id)
        stored = cart.upsert_item(str(product.id), command.quantity)
        repo.save(cart)

        logger.info(
            "cart_item_upserted",
            customer_id=command.customer_id,
            product_id=str(product.id),
            requested_quantity=command.quantity,
            quantity=stored,
        )
        return str(cart.id)

    @handle(RemoveCartItem)
    def remove_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_customer(command.customer_id)
        if cart is None:
            return None

        if cart.remove_item(command.product_id):
            repo.add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.for_customer(command.customer_id)
        if cart is None:
            return None

        removed = cart.clear()
        if removed:
            repo.add(cart)
            logger.info("cart_cleared", customer_id=command.customer_id, items_removed=removed)
        return str(cart.id)
