"""Repository for the Order aggregate — the queries behind order history and rollups."""

from marketplace.domain import marketplace
from marketplace.order.order import Order
from marketplace.pagination import Page, normalize_window


@marketplace.repository(part_of=Order)
class OrderRepository:
    def _page(self, query, page, page_size) -> Page:
        page, page_size = normalize_window(page, page_size)
        results = query.order_by("-created_at").offset((page - 1) * page_size).limit(page_size).all()
        return Page(items=list(results.items), total=results.total, page=page, page_size=page_size)

    def for_customer(self, customer_id: str, page: int = 1, page_size: int = 10) -> Page:
        """Orders placed by ``customer_id``, newest first."""
        return self._page(self.query.filter(customer_id=customer_id), page, page_size)

    def for_shop(self, shop_id: str, page: int = 1, page_size: int = 10) -> Page:
        """Orders fulfilled by ``shop_id``, newest first."""
        return self._page(self.query.filter(shop_id=shop_id), page, page_size)

    def all_for_shop(self, shop_id: str) -> list[Order]:
        # limit(None) has to come last: cloning a query resets an unset limit to the default
        return list(self.query.filter(shop_id=shop_id).limit(None).all().items)
