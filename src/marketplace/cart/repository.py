"""Repository for the Cart aggregate."""

from protean.exceptions import ValidationError

from marketplace.cart.cart import Cart
from marketplace.domain import marketplace
from marketplace.errors import ConflictError


@marketplace.repository(part_of=Cart)
class CartRepository:
    def for_customer(self, customer_id: str) -> Cart | None:
        """The customer's cart, or ``None`` before their first add."""
        if not customer_id:
            raise ValidationError({"customer_id": ["Customer id is required"]})
        return self.query.filter(customer_id=customer_id).all().first

    def for_customer_or_new(self, customer_id: str) -> Cart:
        """The customer's cart, created in memory if it does not exist yet."""
        return self.for_customer(customer_id) or Cart.create(customer_id)

    def save(self, cart: Cart) -> Cart:
        """Persist ``cart``.

        Two first adds for one customer race to create the cart. The one that
        loses trips the unique customer id and is reported as a conflict, so
        the caller can retry against the cart that won.
        """
        creating = cart.state_.is_new
        try:
            return self.add(cart)
        except ValidationError as exc:
            if creating and "customer_id" in exc.messages:
                raise ConflictError(f"A cart for customer {cart.customer_id} was created concurrently") from exc
            raise
