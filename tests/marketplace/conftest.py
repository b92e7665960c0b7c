import pytest
from protean.integrations.pytest import DomainFixture

TEST_JWT_SECRET = "marketplace-test-secret"


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield


@pytest.fixture()
def resolver():
    """JWT resolver with the test secret, installed as the active resolver."""
    from marketplace.identity import reset_resolver, set_resolver
    from marketplace.identity.jwt_adapter import JWTIdentityResolver

    jwt_resolver = JWTIdentityResolver(secret=TEST_JWT_SECRET)
    set_resolver(jwt_resolver)
    yield jwt_resolver
    reset_resolver()


@pytest.fixture()
def make_shop():
    """Factory: persist a shop and return it."""
    from protean import current_domain

    from marketplace.catalogue.shop import Shop

    counter = iter(range(1, 10_000))

    def _make(name="Corner Grocers", address="12 Market Street", license_id=None):
        license_id = license_id or f"LIC-TEST-{next(counter):06d}"
        shop = Shop.register(name=name, address=address, license_id=license_id)
        current_domain.repository_for(Shop).add(shop)
        return shop

    return _make


@pytest.fixture()
def make_product(make_shop):
    """Factory: persist an active product, creating a shop when none is given."""
    from protean import current_domain

    from marketplace.catalogue.product import Product

    def _make(shop=None, name="Basmati Rice", price=10.0, stock=50, **kwargs):
        shop = shop or make_shop()
        product = Product.create(shop_id=str(shop.id), name=name, price=price, stock=stock, **kwargs)
        current_domain.repository_for(Product).add(product)
        return product

    return _make
