import pytest
from marketplace.catalogue.listing import AddProduct, DeactivateProduct, UpdateProductDetails
from marketplace.catalogue.product import Product
from marketplace.catalogue.store import get_product, list_by_shop, products_by_id
from marketplace.errors import ConflictError
from marketplace.identity.model import AuthorizationError
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def add_product(shop_id, actor_id=None, actor_role="shop_owner", **fields):
    data = {"name": "Basmati Rice", "price": 12.5, "stock": 10}
    data.update(fields)
    return current_domain.process(
        AddProduct(actor_id=actor_id or shop_id, actor_role=actor_role, shop_id=shop_id, **data),
        asynchronous=False,
    )


class TestAddProduct:
    def test_owner_adds_product(self, make_shop):
        shop = make_shop()
        product_id = add_product(str(shop.id), sku="rice-5kg")

        product = get_product(product_id)
        assert product.shop_id == str(shop.id)
        assert product.sku == "RICE-5KG"
        assert product.active is True

    def test_other_shop_owner_is_forbidden(self, make_shop):
        shop, other = make_shop(), make_shop()
        with pytest.raises(AuthorizationError):
            add_product(str(shop.id), actor_id=str(other.id))

    def test_customer_is_forbidden(self, make_shop):
        shop = make_shop()
        with pytest.raises(AuthorizationError):
            add_product(str(shop.id), actor_id=str(shop.id), actor_role="customer")

    def test_unknown_shop(self):
        with pytest.raises(ObjectNotFoundError):
            add_product("no-such-shop")

    def test_duplicate_sku_is_a_conflict(self, make_shop):
        shop = make_shop()
        add_product(str(shop.id), sku="RICE-5KG")
        with pytest.raises(ConflictError):
            add_product(str(shop.id), name="Other Rice", sku="rice-5kg")

    def test_invalid_price(self, make_shop):
        shop = make_shop()
        with pytest.raises(ValidationError):
            add_product(str(shop.id), price=0.0)


class TestUpdateProduct:
    def test_owner_updates_price(self, make_product):
        product = make_product(price=10.0)
        current_domain.process(
            UpdateProductDetails(
                actor_id=str(product.shop_id),
                actor_role="shop_owner",
                product_id=str(product.id),
                price=12.0,
            ),
            asynchronous=False,
        )
        assert get_product(product.id).price == 12.0

    def test_stranger_cannot_update(self, make_product, make_shop):
        product = make_product()
        stranger = make_shop()
        with pytest.raises(AuthorizationError):
            current_domain.process(
                UpdateProductDetails(
                    actor_id=str(stranger.id),
                    actor_role="shop_owner",
                    product_id=str(product.id),
                    price=1.0,
                ),
                asynchronous=False,
            )

    def test_sku_taken_by_another_product(self, make_product):
        first = make_product(sku="RICE-1KG")
        second = make_product(shop=None, name="Dal", sku="DAL-1KG")
        with pytest.raises(ConflictError):
            current_domain.process(
                UpdateProductDetails(
                    actor_id=str(second.shop_id),
                    actor_role="shop_owner",
                    product_id=str(second.id),
                    sku=first.sku,
                ),
                asynchronous=False,
            )

    def test_unknown_product(self, make_shop):
        shop = make_shop()
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdateProductDetails(actor_id=str(shop.id), actor_role="shop_owner", product_id="missing", price=2.0),
                asynchronous=False,
            )


class TestDeactivateProduct:
    def test_deactivated_product_no_longer_resolves(self, make_product):
        product = make_product()
        current_domain.process(
            DeactivateProduct(actor_id=str(product.shop_id), actor_role="shop_owner", product_id=str(product.id)),
            asynchronous=False,
        )

        with pytest.raises(ObjectNotFoundError):
            get_product(product.id)
        stored = current_domain.repository_for(Product).get(product.id)
        assert stored.active is False


class TestCatalogStore:
    def test_get_missing_product(self):
        with pytest.raises(ObjectNotFoundError):
            get_product("missing")

    def test_list_by_shop_is_scoped_and_excludes_inactive(self, make_shop, make_product):
        shop, other = make_shop(), make_shop()
        kept = make_product(shop=shop, name="Rice")
        withdrawn = make_product(shop=shop, name="Dal")
        make_product(shop=other, name="Oil")

        withdrawn.deactivate()
        current_domain.repository_for(Product).add(withdrawn)

        page = list_by_shop(str(shop.id))
        assert [str(p.id) for p in page.items] == [str(kept.id)]
        assert page.total == 1

    def test_list_by_shop_paginates(self, make_shop, make_product):
        shop = make_shop()
        for index in range(5):
            make_product(shop=shop, name=f"Item {index}")

        page = list_by_shop(str(shop.id), page=2, page_size=2)
        assert len(page.items) == 2
        assert page.total == 5
        assert page.total_pages == 3

    def test_list_by_unknown_shop(self):
        with pytest.raises(ObjectNotFoundError):
            list_by_shop("missing")

    def test_products_by_id_skips_unresolvable(self, make_product):
        product = make_product()
        resolved = products_by_id([str(product.id), "missing"])
        assert list(resolved) == [str(product.id)]
