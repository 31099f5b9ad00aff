"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items and its status
history.  All three are created together by ``Order.create()`` and
persisted together by the order store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from shopcore.domain.exceptions import (
    EmptyOrderError,
    InvalidStatusError,
    ValidationError,
)
from shopcore.domain.model.value_objects import (
    Money,
    OrderId,
    Quantity,
    ShippingAddress,
)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    @classmethod
    def parse(cls, value: str | OrderStatus) -> OrderStatus:
        if isinstance(value, OrderStatus):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise InvalidStatusError(
                f"Invalid status. Must be one of: {valid}"
            ) from None


INITIAL_STATUS = OrderStatus.PENDING
INITIAL_NOTE = "Order placed successfully"
DEFAULT_PAYMENT_METHOD = "card"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderItem:
    """Captures the price snapshot of a product at purchase time.

    ``unit_price`` never follows later catalog price changes.
    """

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at reservation time

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class StatusLogEntry:
    """One row of an order's append-only status history."""

    status: OrderStatus
    note: str
    created_at: datetime


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use ``Order.create()`` for new orders — it enforces all business
    rules.  The ``__init__`` is intentionally simple so the store can
    reconstitute persisted orders without re-validating.

    Only ``status``, ``updated_at`` and the status log change after
    creation.
    """

    order_id: OrderId
    user_id: str
    items: list[OrderItem]
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money
    shipping_address: ShippingAddress
    payment_method: str = DEFAULT_PAYMENT_METHOD
    customer_email: str = ""
    customer_name: str = ""
    status: OrderStatus = INITIAL_STATUS
    status_log: list[StatusLogEntry] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        items: list[OrderItem],
        subtotal: Money,
        shipping: Money,
        tax: Money,
        total: Money,
        shipping_address: ShippingAddress,
        payment_method: str | None = None,
        customer_email: str = "",
        customer_name: str = "",
        order_id: OrderId | None = None,
    ) -> Order:
        """Create a new pending order with its initial status log entry."""
        if not user_id:
            raise ValidationError("Order owner is required")
        if not items:
            raise EmptyOrderError("Order must contain at least one item")

        items_subtotal = Money.zero()
        for item in items:
            items_subtotal = items_subtotal + item.line_total
        if items_subtotal.rounded() != subtotal.rounded():
            raise ValidationError(
                f"Subtotal {subtotal} does not match line items {items_subtotal}"
            )
        if (subtotal + shipping + tax).rounded() != total.rounded():
            raise ValidationError(
                f"Total {total} does not equal subtotal + shipping + tax"
            )

        now = _utcnow()
        return Order(
            order_id=order_id or OrderId.generate(),
            user_id=user_id,
            items=list(items),
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total=total,
            shipping_address=shipping_address,
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            customer_email=customer_email,
            customer_name=customer_name or shipping_address.full_name,
            status=INITIAL_STATUS,
            status_log=[StatusLogEntry(INITIAL_STATUS, INITIAL_NOTE, now)],
            created_at=now,
            updated_at=now,
        )

    # --- State changes --------------------------------------------------------

    def record_status(
        self, status: OrderStatus, note: str, at: datetime | None = None
    ) -> StatusLogEntry:
        """Set the status and append the matching history entry.

        Timestamps never go backwards: a clock that reads earlier than the
        last entry is clamped to it.
        """
        at = at or _utcnow()
        if self.status_log and at < self.status_log[-1].created_at:
            at = self.status_log[-1].created_at
        entry = StatusLogEntry(status=status, note=note, created_at=at)
        self.status = status
        self.updated_at = at
        self.status_log.append(entry)
        return entry

    # --- Computed properties --------------------------------------------------

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)
