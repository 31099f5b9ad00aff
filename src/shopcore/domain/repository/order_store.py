"""Abstract store for the Order aggregate (order + items + status log)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcore.domain.model.order import Order, StatusLogEntry


class OrderStore(ABC):
    """Identity-agnostic: callers check ownership before releasing reads."""

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Persist a new order, its items and its initial status entry."""

    @abstractmethod
    async def append_status(self, order: Order, entry: StatusLogEntry) -> None:
        """Persist a status change: new log row plus order status/updated_at."""

    @abstractmethod
    async def get(self, order_id: str) -> Order | None:
        """Return an order by its public ID, or None if not found."""

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[Order]:
        """Return the user's orders, newest first."""
