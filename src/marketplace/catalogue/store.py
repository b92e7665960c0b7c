"""Catalog Store — the read side the cart and checkout paths consult.

Every cart or order mutation that references a product resolves it here at
the moment of the mutation. A product that is missing or withdrawn does not
resolve: lookups fail closed with ``ObjectNotFoundError``.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.catalogue.shop import Shop
from marketplace.pagination import Page


def get_product(product_id: str) -> Product:
    """Return the active product with ``product_id``."""
    product = current_domain.repository_for(Product).get_or_none(product_id)
    if product is None or not product.active:
        raise ObjectNotFoundError(f"Product {product_id} not found")
    return product


def get_shop(shop_id: str) -> Shop:
    shop = current_domain.repository_for(Shop).get_or_none(shop_id)
    if shop is None:
        raise ObjectNotFoundError(f"Shop {shop_id} not found")
    return shop


def list_by_shop(shop_id: str, page: int = 1, page_size: int = 10) -> Page:
    """Active products of an existing shop, newest first."""
    get_shop(shop_id)
    return current_domain.repository_for(Product).list_by_shop(shop_id, page=page, page_size=page_size)


def products_by_id(product_ids) -> dict:
    """Active products among ``product_ids``, keyed by id. Unresolvable ids are left out."""
    resolved = {}
    for product_id in product_ids:
        try:
            resolved[str(product_id)] = get_product(product_id)
        except ObjectNotFoundError:
            continue
    return resolved
