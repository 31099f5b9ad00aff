"""SQL-backed implementation of InventoryLedger."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.domain.exceptions import EntityNotFoundError, OutOfStockError
from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Money, Quantity
from shopcore.domain.repository.inventory_ledger import InventoryLedger, Reservation
from shopcore.infrastructure.persistence.tables import products

logger = logging.getLogger(__name__)


class SqlInventoryLedger(InventoryLedger):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- InventoryLedger interface --------------------------------------------

    async def get_by_id(self, product_id: str) -> Product | None:
        result = await self._session.execute(
            select(products).where(products.c.id == product_id)
        )
        row = result.mappings().first()
        return self._to_domain(row) if row else None

    async def list_all(self) -> list[Product]:
        result = await self._session.execute(select(products).order_by(products.c.name))
        return [self._to_domain(row) for row in result.mappings()]

    async def save(self, product: Product) -> None:
        values = self._to_row(product)
        result = await self._session.execute(
            update(products).where(products.c.id == product.id).values(**values)
        )
        if result.rowcount == 0:
            await self._session.execute(insert(products).values(id=product.id, **values))

    async def reserve(self, product_id: str, quantity: Quantity) -> Reservation:
        qty = quantity.value
        # Check-and-decrement in one statement; the row lock taken by the
        # UPDATE serialises concurrent reservations of the same product.
        result = await self._session.execute(
            update(products)
            .where(products.c.id == product_id, products.c.stock >= qty)
            .values(stock=products.c.stock - qty, updated_at=datetime.now(timezone.utc))
        )
        row = (
            await self._session.execute(
                select(products.c.name, products.c.price, products.c.stock).where(
                    products.c.id == product_id
                )
            )
        ).first()

        if row is None:
            raise EntityNotFoundError(f"Product {product_id} not found")
        if result.rowcount == 0:
            logger.debug(
                "Reservation refused for %s: need %d, have %d", product_id, qty, row.stock
            )
            raise OutOfStockError(product_id, row.name, qty, row.stock)

        return Reservation(
            product_id=product_id,
            product_name=row.name,
            quantity=quantity,
            unit_price=Money(Decimal(row.price)).rounded(),
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(product: Product) -> dict:
        return {
            "name": product.name,
            "price": product.price.amount,
            "stock": product.stock,
            "image_url": product.image_url,
            "updated_at": datetime.now(timezone.utc),
        }

    @staticmethod
    def _to_domain(row) -> Product:
        return Product(
            id=row["id"],
            name=row["name"],
            price=Money(Decimal(row["price"])).rounded(),
            stock=row["stock"],
            image_url=row["image_url"],
        )
