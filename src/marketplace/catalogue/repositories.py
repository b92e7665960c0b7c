"""Custom repositories for catalogue aggregates."""

from marketplace.catalogue.product import Product
from marketplace.catalogue.shop import Shop
from marketplace.domain import marketplace
from marketplace.pagination import Page, normalize_window


@marketplace.repository(part_of=Shop)
class ShopRepository:
    def find_by_license_id(self, license_id: str) -> Shop | None:
        return self.query.filter(license_id=license_id).all().first


@marketplace.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku: str) -> Product | None:
        if not sku:
            return None
        return self.query.filter(sku=sku).all().first

    def list_by_shop(self, shop_id: str, page: int = 1, page_size: int = 10, include_inactive: bool = False) -> Page:
        """Products owned by ``shop_id``, newest first."""
        page, page_size = normalize_window(page, page_size)

        query = self.query.filter(shop_id=shop_id)
        if not include_inactive:
            query = query.filter(active=True)

        results = query.order_by("-created_at").offset((page - 1) * page_size).limit(page_size).all()
        return Page(items=list(results.items), total=results.total, page=page, page_size=page_size)
