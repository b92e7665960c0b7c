"""Marketplace API package."""

from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import cart_router, order_router, product_router, shop_router

ROUTERS = (shop_router, product_router, cart_router, order_router)

__all__ = ["ROUTERS", "cart_router", "order_router", "product_router", "register_error_handlers", "shop_router"]
