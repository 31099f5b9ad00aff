"""Abstract unit of work — the transactional boundary of a use case.

All repositories handed out by one unit of work share one transaction.
Leaving the ``async with`` block without calling ``commit()`` (an
exception, or the caller being cancelled) rolls everything back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.repository.inventory_ledger import InventoryLedger
from shopcore.domain.repository.order_store import OrderStore


class UnitOfWork(ABC):

    products: InventoryLedger
    orders: OrderStore
    carts: CartRepository

    async def __aenter__(self) -> UnitOfWork:
        await self._begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.rollback()
        finally:
            await self._close()

    @abstractmethod
    async def _begin(self) -> None:
        """Acquire the underlying connection/transaction."""

    @abstractmethod
    async def _close(self) -> None:
        """Release the underlying connection."""

    @abstractmethod
    async def commit(self) -> None:
        """Make every change in this unit visible atomically."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard uncommitted changes (a no-op after commit)."""
