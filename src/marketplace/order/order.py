"""Order aggregate — a price-frozen record of one shop's share of a checkout.

Once placed, only the status moves, and only forward:

    PENDING → PROCESSING → COMPLETED
    PENDING → CANCELLED

Lines carry the price read from the catalogue at checkout. Later price
changes on the product never reach a placed order.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.exceptions import InvalidStateError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.events import OrderPlaced, OrderStatusChanged

ORDER_NUMBER_PREFIX = "ORD"
TOTAL_TOLERANCE = 0.005


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def generate_order_number(prefix=ORDER_NUMBER_PREFIX, now=None):
    """Human-readable, globally unique order number, e.g. ``ORD-18F3A2B4C10-9F2E1A``."""
    now = now or datetime.now(UTC)
    millis = int(now.timestamp() * 1000)
    return f"{prefix}-{millis:X}-{uuid4().hex[:6].upper()}"


def configured_prefix():
    return current_domain.config["custom"].get("order_number_prefix", ORDER_NUMBER_PREFIX)


def line_total(price, quantity):
    return round(price * quantity, 2)


@marketplace.entity(part_of="Order")
class OrderLine:
    """A product, the quantity bought and the unit price frozen at checkout."""

    product_id = Identifier(required=True)
    product_name = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    position = Integer(default=0)

    @property
    def subtotal(self):
        return line_total(self.price, self.quantity)


@marketplace.aggregate
class Order:
    id = Identifier(identifier=True)
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    total = Float(required=True, min_value=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_sum_of_lines(self):
        if not self.lines:
            return
        expected = round(sum(line.price * line.quantity for line in self.lines), 2)
        if abs(expected - (self.total or 0.0)) > TOTAL_TOLERANCE:
            raise ValidationError({"total": [f"Order total {self.total} does not match its lines ({expected})"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, shop_id, lines_data):
        """Create a pending order.

        Args:
            customer_id: The customer placing the order.
            shop_id: The shop that fulfils every line.
            lines_data: List of dicts with product_id, product_name, quantity, price.
        """
        if not lines_data:
            raise ValidationError({"lines": ["An order needs at least one line"]})

        now = datetime.now(UTC)
        lines = [
            OrderLine(
                position=index,
                product_id=line["product_id"],
                product_name=line.get("product_name"),
                quantity=line["quantity"],
                price=round(line["price"], 2),
            )
            for index, line in enumerate(lines_data)
        ]
        total = round(sum(line.price * line.quantity for line in lines), 2)

        order = cls(
            id=generate_order_number(prefix=configured_prefix(), now=now),
            customer_id=customer_id,
            shop_id=shop_id,
            lines=lines,
            total=total,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                shop_id=str(shop_id),
                total=total,
                line_count=len(lines),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError(f"Cannot transition order {self.id} from {current.value} to {target_status.value}")

    def transition_to(self, target_status, changed_by):
        if not isinstance(target_status, OrderStatus):
            try:
                target_status = OrderStatus(target_status)
            except ValueError as exc:
                raise ValidationError({"status": [f"Unknown order status: {target_status}"]}) from exc

        self._assert_can_transition(target_status)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                shop_id=str(self.shop_id),
                previous_status=previous,
                new_status=target_status.value,
                changed_by=str(changed_by),
                changed_at=now,
            )
        )

    def start_processing(self, changed_by):
        self.transition_to(OrderStatus.PROCESSING, changed_by)

    def complete(self, changed_by):
        self.transition_to(OrderStatus.COMPLETED, changed_by)

    def cancel(self, changed_by):
        self.transition_to(OrderStatus.CANCELLED, changed_by)

    @property
    def is_terminal(self):
        return not _VALID_TRANSITIONS[OrderStatus(self.status)]

    @property
    def ordered_lines(self):
        return sorted(self.lines, key=lambda line: line.position)
