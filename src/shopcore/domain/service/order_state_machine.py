"""Domain service: Order State Machine.

Decides whether a status change is legal and which changes notify the
customer.  By default any recognised status may be set from any other
(the storefront's admin tooling relies on this to correct mistakes);
``strict=True`` switches to a finite forward-only table where
``cancelled`` is reachable from every non-terminal state.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.domain.exceptions import InvalidStatusError
from shopcore.domain.model.order import Order, OrderStatus, StatusLogEntry

NOTIFY_STATUSES = frozenset(
    {OrderStatus.SHIPPED, OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED}
)

_FORWARD = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

STRICT_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    status: frozenset(_FORWARD[i + 1 : i + 2]) | {OrderStatus.CANCELLED}
    for i, status in enumerate(_FORWARD)
    if not status.is_terminal
}
STRICT_TRANSITIONS[OrderStatus.DELIVERED] = frozenset()
STRICT_TRANSITIONS[OrderStatus.CANCELLED] = frozenset()


@dataclass(frozen=True)
class Transition:
    """Outcome of a status change."""

    previous: OrderStatus
    current: OrderStatus
    entry: StatusLogEntry

    @property
    def notifies_customer(self) -> bool:
        return self.current in NOTIFY_STATUSES


class OrderStateMachine:

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def check(self, order: Order, new_status: str | OrderStatus) -> OrderStatus:
        """Validate *new_status* for *order* without changing anything."""
        target = OrderStatus.parse(new_status)
        if self._strict and target not in STRICT_TRANSITIONS[order.status]:
            raise InvalidStatusError(
                f"Cannot move order {order.order_id} "
                f"from {order.status.value} to {target.value}"
            )
        return target

    def transition(
        self, order: Order, new_status: str | OrderStatus, note: str | None = None
    ) -> Transition:
        target = self.check(order, new_status)
        previous = order.status
        entry = order.record_status(
            target,
            note or f"Status changed from {previous.value} to {target.value}",
        )
        return Transition(previous=previous, current=target, entry=entry)
