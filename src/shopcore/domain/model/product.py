"""Product aggregate.

Products belong to the catalog. Checkout only reads them, and stock is
only ever changed through the inventory ledger's atomic reserve.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.domain.exceptions import ValidationError
from shopcore.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Invariant: ``stock`` is never negative.
    """

    id: str
    name: str
    price: Money
    stock: int = 0
    image_url: str | None = None

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(
                f"Stock for {self.name} cannot be negative, got {self.stock}"
            )

    @staticmethod
    def create(
        id: str,
        name: str,
        price: Money,
        stock: int,
        image_url: str | None = None,
    ) -> Product:
        """Create a new catalog entry, enforcing catalog rules."""
        if not id or not id.strip():
            raise ValidationError("Product id is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        return Product(
            id=id.strip(),
            name=name.strip(),
            price=price,
            stock=stock,
            image_url=image_url,
        )
