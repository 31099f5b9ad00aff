"""Application service: Get Order Status use case (query).

Returns the current status with the full history, oldest entry first.
"""

from __future__ import annotations

from collections.abc import Callable

from shopcore.application.dto import OrderStatusDTO, StatusHistoryEntryDTO
from shopcore.application.show_order import load_owned_order
from shopcore.domain.model.principal import Principal, require_principal
from shopcore.domain.repository.unit_of_work import UnitOfWork


class GetOrderStatusHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def handle(self, principal: Principal | None, order_id: str) -> OrderStatusDTO:
        require_principal(principal)
        async with self._uow_factory() as uow:
            order = await load_owned_order(uow, principal, order_id)

        history = sorted(order.status_log, key=lambda e: e.created_at)
        return OrderStatusDTO(
            order_id=str(order.order_id),
            current_status=order.status.value,
            total=order.total.amount,
            created_at=order.created_at,
            updated_at=order.updated_at,
            history=tuple(StatusHistoryEntryDTO.from_entry(e) for e in history),
        )
