"""Order status changes — commands and handler.

Shop owners move their own shop's orders forward. Customers may cancel
their own orders while they are still pending. Cancelling an order the caller
cannot see reports it as missing, the same as reading it.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import logger, marketplace
from marketplace.identity.model import AuthorizationError, Role, identity_for
from marketplace.order.order import Order, OrderStatus
from marketplace.order.queries import visible_order


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


def _load(order_id):
    repo = current_domain.repository_for(Order)
    order = repo.get_or_none(order_id)
    if order is None:
        raise ObjectNotFoundError(f"Order {order_id} not found")
    return repo, order


@marketplace.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        actor = identity_for(command.actor_id, command.actor_role)
        repo, order = _load(command.order_id)

        if not actor.owns_shop(order.shop_id):
            raise AuthorizationError("Only the owner of the fulfilling shop can update this order")

        previous = order.status
        order.transition_to(command.status, changed_by=actor.id)
        repo.add(order)

        logger.info("order_status_changed", order_id=str(order.id), previous=previous, status=order.status)
        return order.status

    @handle(CancelOrder)
    def cancel_order(self, command):
        actor = identity_for(command.actor_id, command.actor_role)
        order = visible_order(actor, command.order_id)

        # The fulfilling shop can see the order but may not cancel it.
        if actor.role != Role.CUSTOMER or str(order.customer_id) != actor.id:
            raise AuthorizationError("Only the customer who placed the order can cancel it")

        repo = current_domain.repository_for(Order)
        order.cancel(changed_by=actor.id)
        repo.add(order)

        logger.info("order_cancelled", order_id=str(order.id), customer_id=actor.id)
        return OrderStatus.CANCELLED.value
