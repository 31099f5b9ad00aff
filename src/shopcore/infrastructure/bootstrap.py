"""Builds the running shop from settings.

``Container`` owns the database engine and the notification dispatcher
and hands out use-case handlers bound to a SQL unit of work.  The CLI
(and any future HTTP adapter) gets its handlers from here.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.application.cart import ShowCartHandler, SyncCartHandler
from shopcore.application.checkout import CheckoutHandler
from shopcore.application.list_orders import ListOrdersHandler
from shopcore.application.notifications import DetachedDispatcher, Notifier
from shopcore.application.order_status import GetOrderStatusHandler
from shopcore.application.products import AddProductHandler, ListProductsHandler
from shopcore.application.show_order import ShowOrderHandler
from shopcore.application.update_order_status import UpdateOrderStatusHandler
from shopcore.domain.service.order_state_machine import OrderStateMachine
from shopcore.domain.service.pricing import PricingEngine
from shopcore.infrastructure.config import Settings
from shopcore.infrastructure.notifications.http_notifier import HttpNotifier
from shopcore.infrastructure.notifications.logging_notifier import LoggingNotifier
from shopcore.infrastructure.persistence.database import Database
from shopcore.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


def build_notifier(settings: Settings) -> Notifier:
    if settings.notify_url:
        return HttpNotifier(
            settings.notify_url,
            token=settings.notify_token,
            timeout=settings.notify_timeout,
        )
    return LoggingNotifier()


@dataclass
class Container:

    settings: Settings
    database: Database
    dispatcher: DetachedDispatcher
    pricing: PricingEngine
    state_machine: OrderStateMachine

    def unit_of_work(self) -> SqlUnitOfWork:
        return SqlUnitOfWork(self.database)

    # --- Handlers -------------------------------------------------------------

    def checkout(self) -> CheckoutHandler:
        return CheckoutHandler(self.unit_of_work, self.pricing, self.dispatcher)

    def update_order_status(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(
            self.unit_of_work, self.state_machine, self.dispatcher
        )

    def show_order(self) -> ShowOrderHandler:
        return ShowOrderHandler(self.unit_of_work)

    def order_status(self) -> GetOrderStatusHandler:
        return GetOrderStatusHandler(self.unit_of_work)

    def list_orders(self) -> ListOrdersHandler:
        return ListOrdersHandler(self.unit_of_work)

    def sync_cart(self) -> SyncCartHandler:
        return SyncCartHandler(self.unit_of_work, self.pricing)

    def show_cart(self) -> ShowCartHandler:
        return ShowCartHandler(self.unit_of_work, self.pricing)

    def add_product(self) -> AddProductHandler:
        return AddProductHandler(self.unit_of_work)

    def list_products(self) -> ListProductsHandler:
        return ListProductsHandler(self.unit_of_work)

    # --- Lifecycle ------------------------------------------------------------

    async def aclose(self) -> None:
        """Let pending notifications finish, then release the pool."""
        await self.dispatcher.drain()
        await self.database.dispose()


def build_container(
    settings: Settings | None = None, notifier: Notifier | None = None
) -> Container:
    settings = settings or Settings.from_env()
    return Container(
        settings=settings,
        database=Database(settings),
        dispatcher=DetachedDispatcher(notifier or build_notifier(settings)),
        pricing=PricingEngine(),
        state_machine=OrderStateMachine(strict=settings.strict_transitions),
    )
