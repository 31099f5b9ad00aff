"""End-to-end checkout against SQLite (aiosqlite).

Exercises the real transactional boundary and the conditional stock
update, including concurrent buyers racing for the last unit.
"""

import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from shopcore.application.dto import LineItemRequest
from shopcore.domain.exceptions import EntityNotFoundError, OutOfStockError
from shopcore.domain.model.order import OrderStatus
from shopcore.domain.model.principal import Principal
from shopcore.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork
from shopcore.infrastructure.persistence.tables import (
    cart_items,
    order_items,
    order_status_logs,
    orders,
)
from tests.fakes import ADDRESS

ALICE = Principal("u-alice", "alice@example.com", "Alice")
BOB = Principal("u-bob", "bob@example.com", "Bob")
ADMIN = Principal("u-admin", "ops@example.com", "Ops", is_admin=True)


async def stock_of(container, product_id: str) -> int:
    async with container.unit_of_work() as uow:
        return (await uow.products.get_by_id(product_id)).stock


async def _count(container, table) -> int:
    async with container.database.engine.connect() as conn:
        return (await conn.execute(select(func.count()).select_from(table))).scalar_one()


class TestSqlCheckout:

    async def test_persists_order_items_and_initial_log_together(self, container):
        view = await container.checkout().handle(
            ALICE,
            ADDRESS,
            "card",
            [LineItemRequest("p-widget", 3), LineItemRequest("p-gadget", 1)],
        )

        assert view.total == Decimal("75.60")  # 70.00 + 0.00 + 5.60
        assert await _count(container, orders) == 1
        assert await _count(container, order_items) == 2
        assert await _count(container, order_status_logs) == 1
        assert await _count(container, cart_items) == 0
        assert await stock_of(container, "p-widget") == 7
        assert await stock_of(container, "p-gadget") == 4

    async def test_round_trip_through_store(self, container):
        view = await container.checkout().handle(
            ALICE, ADDRESS, "card", [LineItemRequest("p-widget", 3)]
        )
        async with container.unit_of_work() as uow:
            order = await uow.orders.get(view.order_id)

        assert order.subtotal.amount == Decimal("45.00")
        assert order.shipping.amount == Decimal("5.99")
        assert order.tax.amount == Decimal("3.60")
        assert order.total.amount == Decimal("54.59")
        assert order.items[0].unit_price.amount == Decimal("15.00")
        assert order.status_log[0].status == OrderStatus.PENDING
        assert order.shipping_address.zip_code == "N1 9GU"
        assert order.created_at.tzinfo is not None

    async def test_unknown_product_rolls_back_earlier_reservations(self, container):
        with pytest.raises(EntityNotFoundError):
            await container.checkout().handle(
                ALICE,
                ADDRESS,
                "card",
                [LineItemRequest("p-widget", 4), LineItemRequest("p-ghost", 1)],
            )
        assert await stock_of(container, "p-widget") == 10
        assert await _count(container, orders) == 0
        assert await _count(container, cart_items) == 1

    async def test_out_of_stock_persists_nothing(self, container):
        with pytest.raises(OutOfStockError, match="Insufficient stock for Gadget"):
            await container.checkout().handle(
                ALICE,
                ADDRESS,
                "card",
                [LineItemRequest("p-widget", 1), LineItemRequest("p-gadget", 6)],
            )
        assert await stock_of(container, "p-widget") == 10
        assert await stock_of(container, "p-gadget") == 5
        assert await _count(container, orders) == 0

    async def test_concurrent_buyers_for_last_unit(self, container):
        results = await asyncio.gather(
            container.checkout().handle(ALICE, ADDRESS, "card", [LineItemRequest("p-last", 1)]),
            container.checkout().handle(BOB, ADDRESS, "card", [LineItemRequest("p-last", 1)]),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1, results
        assert isinstance(failures[0], OutOfStockError)
        assert await stock_of(container, "p-last") == 0
        assert await _count(container, orders) == 1

    async def test_stock_never_goes_negative(self, container):
        buyers = [Principal(f"u-{n}", f"{n}@example.com") for n in range(8)]
        results = await asyncio.gather(
            *(
                container.checkout().handle(b, ADDRESS, "card", [LineItemRequest("p-gadget", 2)])
                for b in buyers
            ),
            return_exceptions=True,
        )
        placed = [r for r in results if not isinstance(r, Exception)]
        assert len(placed) == 2
        assert all(isinstance(r, OutOfStockError) for r in results if isinstance(r, Exception))
        assert await stock_of(container, "p-gadget") == 1

    async def test_cancelled_checkout_leaves_no_trace(self, container):
        started = asyncio.Event()
        real_uow = container.unit_of_work

        class StallingUow(SqlUnitOfWork):
            async def commit(self):
                started.set()
                await asyncio.Event().wait()

        container.unit_of_work = lambda: StallingUow(container.database)

        task = asyncio.ensure_future(
            container.checkout().handle(ALICE, ADDRESS, "card", [LineItemRequest("p-widget", 2)])
        )
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        container.unit_of_work = real_uow
        assert await stock_of(container, "p-widget") == 10
        assert await _count(container, orders) == 0


class TestSqlOrderLifecycle:

    async def test_status_update_and_history(self, container, notifier):
        view = await container.checkout().handle(
            ALICE, ADDRESS, "card", [LineItemRequest("p-widget", 1)]
        )
        await container.update_order_status().handle(ADMIN, view.order_id, "shipped")
        await container.dispatcher.drain()

        status = await container.order_status().handle(ALICE, view.order_id)
        assert status.current_status == "shipped"
        assert [h.status for h in status.history] == ["pending", "shipped"]
        assert [e.type.value for e in notifier.sent] == ["confirmation", "status_update"]

    async def test_list_orders_newest_first(self, container):
        first = await container.checkout().handle(
            ALICE, ADDRESS, "card", [LineItemRequest("p-widget", 1)]
        )
        second = await container.checkout().handle(
            ALICE, ADDRESS, "card", [LineItemRequest("p-gadget", 1)]
        )
        summaries = await container.list_orders().handle(ALICE)
        assert [s.order_id for s in summaries] == [second.order_id, first.order_id]
        assert summaries[0].items[0].name == "Gadget"

    async def test_show_order_is_stable(self, container):
        view = await container.checkout().handle(
            ALICE, ADDRESS, "card", [LineItemRequest("p-widget", 1)]
        )
        again = await container.show_order().handle(ALICE, view.order_id)
        assert again == await container.show_order().handle(ALICE, view.order_id)
        assert again.order_id == view.order_id
