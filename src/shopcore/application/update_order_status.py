"""Application service: Update Order Status use case.

Applies a transition through the state machine, persists the new status
and its history row in one transaction, then notifies the customer for
delivery-progress statuses.  A failed notification never undoes the
status change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from shopcore.application.dto import StatusChangeDTO
from shopcore.application.notifications import DetachedDispatcher, OrderEmail
from shopcore.domain.exceptions import EntityNotFoundError, ValidationError
from shopcore.domain.model.order import OrderStatus
from shopcore.domain.model.principal import Principal, require_admin
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.order_state_machine import OrderStateMachine

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        state_machine: OrderStateMachine,
        dispatcher: DetachedDispatcher,
    ) -> None:
        self._uow_factory = uow_factory
        self._state_machine = state_machine
        self._dispatcher = dispatcher

    async def handle(
        self,
        principal: Principal | None,
        order_id: str,
        status: str,
        note: str | None = None,
    ) -> StatusChangeDTO:
        require_admin(principal)
        if not order_id or not status:
            raise ValidationError("Order ID and status are required")
        target = OrderStatus.parse(status)

        async with self._uow_factory() as uow:
            order = await uow.orders.get(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order {order_id} not found")
            transition = self._state_machine.transition(order, target, note)
            await uow.orders.append_status(order, transition.entry)
            await uow.commit()

        logger.info(
            "Order %s status updated: %s -> %s",
            order_id,
            transition.previous.value,
            transition.current.value,
        )
        if transition.notifies_customer:
            self._dispatcher.dispatch(OrderEmail.status_update(order, transition.previous))

        return StatusChangeDTO(
            order_id=order_id,
            previous_status=transition.previous.value,
            new_status=transition.current.value,
        )
