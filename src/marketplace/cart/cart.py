"""Cart aggregate — one mutable cart per customer.

The cart holds product references and quantities only, never prices. Prices
and availability are joined in from the catalogue whenever the cart is shown,
and frozen into an order at checkout. The cart itself is emptied on checkout,
never deleted.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from marketplace.cart.events import CartCleared, CartItemRemoved, CartItemUpserted
from marketplace.domain import marketplace

MIN_ITEM_QUANTITY = 1
MAX_ITEM_QUANTITY = 100


def validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < MIN_ITEM_QUANTITY:
        raise ValidationError({"quantity": ["Quantity must be a positive integer"]})
    return quantity


def clamp_quantity(quantity: int) -> int:
    return max(MIN_ITEM_QUANTITY, min(MAX_ITEM_QUANTITY, quantity))


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=MIN_ITEM_QUANTITY, max_value=MAX_ITEM_QUANTITY)
    added_at = DateTime()


@marketplace.aggregate
class Cart:
    customer_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def product_ids_must_be_unique(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def ordered_items(self):
        """Items in the order they were first added."""
        return sorted(self.items, key=lambda item: item.added_at or self.created_at)

    @property
    def is_empty(self):
        return not self.items

    def item_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def upsert_item(self, product_id, quantity):
        """Put ``product_id`` in the cart with ``quantity``, replacing any existing quantity.

        The stored quantity is clamped to [1, 100]. Returns the stored quantity.
        """
        effective = clamp_quantity(validate_quantity(quantity))
        now = datetime.now(UTC)

        existing = self.item_for(product_id)
        previous = existing.quantity if existing else 0
        if existing:
            existing.quantity = effective
        else:
            self.add_items(CartItem(product_id=product_id, quantity=effective, added_at=now))

        self.updated_at = now
        self.raise_(
            CartItemUpserted(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                requested_quantity=quantity,
                quantity=effective,
                previous_quantity=previous,
            )
        )
        return effective

    def remove_item(self, product_id):
        """Take ``product_id`` out of the cart.

        Removing a product that is not in the cart changes nothing. Returns
        whether an item was removed.
        """
        existing = self.item_for(product_id)
        if existing is None:
            return False

        self.remove_items(existing)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
            )
        )
        return True

    def clear(self):
        """Empty the cart. Returns the number of items removed."""
        count = len(self.items)
        if count == 0:
            return 0

        for item in list(self.items):
            self.remove_items(item)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                items_removed=count,
            )
        )
        return count
