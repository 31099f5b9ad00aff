"""Application service: Show Order use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from shopcore.application.dto import OrderView
from shopcore.domain.exceptions import EntityNotFoundError
from shopcore.domain.model.order import Order
from shopcore.domain.model.principal import Principal, require_owner
from shopcore.domain.repository.unit_of_work import UnitOfWork


async def load_owned_order(
    uow: UnitOfWork, principal: Principal | None, order_id: str
) -> Order:
    """Fetch an order and release it only to its owner or an admin."""
    order = await uow.orders.get(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order {order_id} not found")
    require_owner(principal, order.user_id)
    return order


class ShowOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def handle(self, principal: Principal | None, order_id: str) -> OrderView:
        async with self._uow_factory() as uow:
            order = await load_owned_order(uow, principal, order_id)
        return OrderView.from_order(order)
