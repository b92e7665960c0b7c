"""Shared BDD fixtures and step definitions for the Marketplace domain."""

import pytest
from marketplace.cart.cart import Cart
from marketplace.cart.items import UpsertCartItem
from marketplace.catalogue.product import Product
from marketplace.order.checkout import Checkout
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ProteanException, ValidationError
from pytest_bdd import given, parsers, then


@pytest.fixture()
def catalog():
    """Shops and products by name."""
    return {"shops": {}, "products": {}}


@pytest.fixture()
def error():
    """Container for the exception raised by the last When step."""
    return {"exc": None}


@pytest.fixture()
def attempt(error):
    """Run a step action, capturing a domain failure instead of raising it."""

    def _attempt(fn, *args, **kwargs):
        error["exc"] = None
        try:
            return fn(*args, **kwargs)
        except ProteanException as exc:
            error["exc"] = exc
            return None

    return _attempt


def upsert(customer, product, quantity):
    return current_domain.process(
        UpsertCartItem(customer_id=customer, product_id=str(product.id), quantity=quantity),
        asynchronous=False,
    )


def checkout(customer):
    return current_domain.process(Checkout(customer_id=customer), asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a shop "{name}"'))
def a_shop(catalog, make_shop, name):
    catalog["shops"][name] = make_shop(name=name)


@given(parsers.cfparse('a product "{name}" priced {price:f} in shop "{shop}"'))
def a_product(catalog, make_product, name, price, shop):
    catalog["products"][name] = make_product(shop=catalog["shops"][shop], name=name, price=price)


@given(parsers.cfparse('the product "{name}" is withdrawn'))
def product_withdrawn(catalog, name):
    product = catalog["products"][name]
    product.deactivate()
    current_domain.repository_for(Product).add(product)


@given(parsers.cfparse('customer "{customer}" has {quantity:d} of "{name}" in the cart'))
def cart_holds(catalog, customer, quantity, name):
    upsert(customer, catalog["products"][name], quantity)


@given(parsers.cfparse('customer "{customer}" has ordered {quantity:d} of "{name}"'))
def has_ordered(catalog, customer, quantity, name):
    upsert(customer, catalog["products"][name], quantity)
    checkout(customer)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cart of "{customer}" holds {quantity:d} of "{name}"'))
def cart_of_holds(catalog, customer, quantity, name):
    cart = current_domain.repository_for(Cart).for_customer(customer)
    item = cart.item_for(str(catalog["products"][name].id))
    assert item is not None
    assert item.quantity == quantity


@then(parsers.cfparse('the cart of "{customer}" is empty'))
def cart_is_empty(customer):
    cart = current_domain.repository_for(Cart).for_customer(customer)
    assert cart is None or cart.is_empty


@then("the request fails as not found")
def failed_not_found(error):
    assert isinstance(error["exc"], ObjectNotFoundError)


@then("the request is rejected as invalid")
def rejected_invalid(error):
    assert isinstance(error["exc"], ValidationError)
