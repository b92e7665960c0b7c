"""Marketplace bounded context — catalogue, carts, orders and shop analytics.

Customers keep a single mutable cart of product references. Checkout freezes
the cart into price-snapshotted orders, one per fulfilling shop, and shop
owners read sales rollups derived from their order history.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
marketplace = Domain(name="marketplace")
