"""Domain events for the Shop and Product aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Shop")
class ShopRegistered:
    """A new shop joined the marketplace."""

    __version__ = 1

    shop_id: Identifier(required=True)
    name: String(required=True)
    license_id: String(required=True)
    registered_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductAdded:
    """A shop listed a new product."""

    __version__ = 1

    product_id: Identifier(required=True)
    shop_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    stock: Integer(required=True)
    category: String(required=True)
    added_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductDetailsUpdated:
    """Product details changed. Placed orders keep the price they were placed at."""

    __version__ = 1

    product_id: Identifier(required=True)
    shop_id: Identifier(required=True)
    changed_fields: String(required=True)  # comma-separated field names
    price: Float(required=True)
    stock: Integer(required=True)
    updated_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductDeactivated:
    """A product was withdrawn. Carts that still reference it fail closed at checkout."""

    __version__ = 1

    product_id: Identifier(required=True)
    shop_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
