"""Application service: List Orders use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from shopcore.application.dto import OrderSummaryDTO
from shopcore.domain.model.principal import Principal, require_principal
from shopcore.domain.repository.unit_of_work import UnitOfWork


class ListOrdersHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def handle(self, principal: Principal | None) -> list[OrderSummaryDTO]:
        """Return the caller's own orders, newest first."""
        principal = require_principal(principal)
        async with self._uow_factory() as uow:
            orders = await uow.orders.list_for_user(principal.user_id)
        return [OrderSummaryDTO.from_order(o) for o in orders]
