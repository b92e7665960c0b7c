"""BDD tests for checkout."""

from marketplace.catalogue.listing import UpdateProductDetails
from marketplace.order.checkout import Checkout
from marketplace.order.queries import customer_orders
from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/checkout.feature")


@when(parsers.cfparse('customer "{customer}" checks out'))
def checks_out(attempt, customer):
    attempt(current_domain.process, Checkout(customer_id=customer), asynchronous=False)


@when(parsers.cfparse('the price of "{name}" changes to {price:f}'))
def price_changes(catalog, name, price):
    product = catalog["products"][name]
    current_domain.process(
        UpdateProductDetails(
            actor_id=str(product.shop_id),
            actor_role="shop_owner",
            product_id=str(product.id),
            price=price,
        ),
        asynchronous=False,
    )


@then(parsers.cfparse('"{customer}" has {count:d} pending order totalling {total:f}'))
def pending_orders(customer, count, total):
    orders = customer_orders(customer).items
    assert len(orders) == count
    assert all(order.status == "pending" for order in orders)
    assert round(sum(order.total for order in orders), 2) == total


@then(parsers.cfparse('"{customer}" has no orders'))
def no_orders(customer):
    assert customer_orders(customer).total == 0
