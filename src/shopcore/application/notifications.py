"""Order e-mail notifications and their detached dispatch.

Notifications are fire-and-forget: a send runs as its own asyncio task
after the transaction that caused it has committed.  Its outcome never
reaches the caller; failures are logged and dropped.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from shopcore.domain.model.order import Order, OrderStatus

logger = logging.getLogger(__name__)


class EmailType(Enum):
    CONFIRMATION = "confirmation"
    STATUS_UPDATE = "status_update"


@dataclass(frozen=True)
class OrderEmail:

    type: EmailType
    order_id: str
    email: str
    name: str
    items: tuple[dict, ...] | None = None
    total: float | None = None
    shipping_address: dict | None = None
    status: str | None = None
    previous_status: str | None = None

    @staticmethod
    def confirmation(order: Order) -> OrderEmail:
        return OrderEmail(
            type=EmailType.CONFIRMATION,
            order_id=str(order.order_id),
            email=order.customer_email,
            name=order.customer_name,
            items=tuple(
                {
                    "name": item.product_name,
                    "quantity": item.quantity.value,
                    "price": float(item.unit_price),
                }
                for item in order.items
            ),
            total=float(order.total),
            shipping_address=order.shipping_address.to_dict(),
        )

    @staticmethod
    def status_update(order: Order, previous: OrderStatus) -> OrderEmail:
        return OrderEmail(
            type=EmailType.STATUS_UPDATE,
            order_id=str(order.order_id),
            email=order.customer_email,
            name=order.customer_name,
            status=order.status.value,
            previous_status=previous.value,
        )

    def to_payload(self) -> dict:
        payload = {
            "type": self.type.value,
            "orderId": self.order_id,
            "email": self.email,
            "name": self.name,
            "items": list(self.items) if self.items is not None else None,
            "total": self.total,
            "shippingAddress": self.shipping_address,
            "status": self.status,
            "previousStatus": self.previous_status,
        }
        return {k: v for k, v in payload.items() if v is not None}


class Notifier(ABC):

    @abstractmethod
    async def send(self, email: OrderEmail) -> None:
        """Deliver one order e-mail; raise on failure."""


class DetachedDispatcher:
    """Runs notifier sends as background tasks.

    Holds a strong reference to every pending task so the event loop
    cannot garbage-collect it mid-flight.  Tasks are independent of the
    request that spawned them, so a caller that is cancelled after
    commit does not cancel its notification.
    """

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, email: OrderEmail) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(
            self._send(email), name=f"order-email-{email.order_id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every in-flight notification (used at shutdown)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _send(self, email: OrderEmail) -> None:
        try:
            await self._notifier.send(email)
        except Exception:
            logger.exception(
                "Failed to send %s email for order %s",
                email.type.value,
                email.order_id,
            )
