"""SQL-backed implementation of CartRepository."""

from __future__ import annotations

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.domain.model.cart import CartItem
from shopcore.domain.model.value_objects import Quantity
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.infrastructure.persistence.tables import cart_items


class SqlCartRepository(CartRepository):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: str) -> list[CartItem]:
        result = await self._session.execute(
            select(cart_items.c.product_id, cart_items.c.quantity)
            .where(cart_items.c.user_id == user_id)
            .order_by(cart_items.c.id)
        )
        return [
            CartItem(user_id=user_id, product_id=row.product_id, quantity=Quantity(row.quantity))
            for row in result
        ]

    async def replace(self, user_id: str, items: list[CartItem]) -> None:
        await self.clear(user_id)
        if items:
            await self._session.execute(
                insert(cart_items),
                [
                    {
                        "user_id": user_id,
                        "product_id": item.product_id,
                        "quantity": item.quantity.value,
                    }
                    for item in items
                ],
            )

    async def clear(self, user_id: str) -> int:
        result = await self._session.execute(
            delete(cart_items).where(cart_items.c.user_id == user_id)
        )
        return result.rowcount
