"""Abstract inventory ledger for the Product catalog.

Defined in the domain layer so the domain never depends on
infrastructure.  The ledger is the only writer of product stock.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class Reservation:
    """Result of a successful reserve: the price snapshot at that moment."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money


class InventoryLedger(ABC):

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    async def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    async def save(self, product: Product) -> None:
        """Persist a new or updated catalog entry (admin use only)."""

    @abstractmethod
    async def reserve(self, product_id: str, quantity: Quantity) -> Reservation:
        """Atomically check and decrement stock.

        Raises EntityNotFoundError for an unknown product and
        OutOfStockError when *quantity* exceeds current stock.  The
        check and the decrement are indivisible with respect to other
        reservations on the same product.
        """
