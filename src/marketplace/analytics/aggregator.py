"""Analytics Aggregator — per-shop order history and sales rollups.

Rollups are computed from the persisted orders on every call, so they can
never drift from the order history they summarize.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from marketplace.catalogue.store import get_shop
from marketplace.order.order import Order, OrderStatus
from marketplace.pagination import Page


@dataclass(frozen=True)
class SalesSummary:
    total_sales: float
    completed_order_count: int

    def to_dict(self) -> dict:
        return {"totalSales": self.total_sales, "completedOrderCount": self.completed_order_count}


def list_orders(shop_id: str, page: int = 1, page_size: int = 10) -> Page:
    """Orders for an existing shop, most recent first."""
    get_shop(shop_id)
    return current_domain.repository_for(Order).for_shop(shop_id, page=page, page_size=page_size)


def summarize(shop_id: str, include_cancelled: bool = True) -> SalesSummary:
    """Sales total and completed-order count for a shop.

    ``total_sales`` covers every order regardless of status unless
    ``include_cancelled`` is False.
    """
    orders = current_domain.repository_for(Order).all_for_shop(shop_id)
    if not include_cancelled:
        orders = [order for order in orders if order.status != OrderStatus.CANCELLED.value]

    total_sales = round(sum(order.total for order in orders), 2)
    completed = sum(1 for order in orders if order.status == OrderStatus.COMPLETED.value)
    return SalesSummary(total_sales=total_sales, completed_order_count=completed)
