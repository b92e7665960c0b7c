import pytest
from marketplace.cart.items import UpsertCartItem
from marketplace.identity.model import Customer, ShopOwner
from marketplace.order.checkout import Checkout
from protean import current_domain


@pytest.fixture()
def customer():
    return Customer(id="cust-0001")


@pytest.fixture()
def owner_of():
    """Factory: the owner identity of a shop."""

    def _owner(shop):
        return ShopOwner(id=str(shop.id))

    return _owner


@pytest.fixture()
def add_to_cart():
    def _add(customer_id, product, quantity):
        return current_domain.process(
            UpsertCartItem(customer_id=customer_id, product_id=str(product.id), quantity=quantity),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def checkout():
    def _checkout(customer_id, expected_total=None):
        return current_domain.process(
            Checkout(customer_id=customer_id, expected_total=expected_total),
            asynchronous=False,
        )

    return _checkout


@pytest.fixture()
def place_order(make_product, add_to_cart, checkout):
    """Factory: check out a single-line cart and return the stored order."""
    from marketplace.order.order import Order

    def _place(shop, customer_id="cust-0001", price=10.0, quantity=1):
        product = make_product(shop=shop, price=price)
        add_to_cart(customer_id, product, quantity)
        (order_id,) = checkout(customer_id)
        return current_domain.repository_for(Order).get(order_id)

    return _place
