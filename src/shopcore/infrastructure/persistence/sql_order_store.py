"""SQL-backed implementation of OrderStore.

The order row, its item rows and its status rows are written on the
caller's session; they become visible together when the unit of work
commits.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.domain.model.order import Order, OrderItem, OrderStatus, StatusLogEntry
from shopcore.domain.model.value_objects import Money, OrderId, Quantity, ShippingAddress
from shopcore.domain.repository.order_store import OrderStore
from shopcore.infrastructure.persistence.tables import (
    order_items,
    order_status_logs,
    orders,
)


class SqlOrderStore(OrderStore):

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # --- OrderStore interface -------------------------------------------------

    async def add(self, order: Order) -> None:
        result = await self._session.execute(insert(orders).values(**self._to_row(order)))
        pk = result.inserted_primary_key[0]

        await self._session.execute(
            insert(order_items),
            [
                {
                    "order_id": pk,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "price": item.unit_price.amount,
                    "created_at": order.created_at,
                }
                for item in order.items
            ],
        )
        await self._session.execute(
            insert(order_status_logs),
            [
                {
                    "order_id": pk,
                    "status": entry.status.value,
                    "note": entry.note,
                    "created_at": entry.created_at,
                }
                for entry in order.status_log
            ],
        )

    async def append_status(self, order: Order, entry: StatusLogEntry) -> None:
        order_pk = (
            select(orders.c.id)
            .where(orders.c.order_id == str(order.order_id))
            .scalar_subquery()
        )
        await self._session.execute(
            update(orders)
            .where(orders.c.order_id == str(order.order_id))
            .values(status=entry.status.value, updated_at=entry.created_at)
        )
        await self._session.execute(
            insert(order_status_logs).values(
                order_id=order_pk,
                status=entry.status.value,
                note=entry.note,
                created_at=entry.created_at,
            )
        )

    async def get(self, order_id: str) -> Order | None:
        result = await self._session.execute(
            select(orders).where(orders.c.order_id == order_id)
        )
        row = result.mappings().first()
        if row is None:
            return None
        items, logs = await self._load_children([row["id"]])
        return self._to_domain(row, items[row["id"]], logs[row["id"]])

    async def list_for_user(self, user_id: str) -> list[Order]:
        result = await self._session.execute(
            select(orders)
            .where(orders.c.user_id == user_id)
            .order_by(orders.c.created_at.desc(), orders.c.id.desc())
        )
        rows = result.mappings().all()
        if not rows:
            return []
        items, logs = await self._load_children([r["id"] for r in rows])
        return [self._to_domain(r, items[r["id"]], logs[r["id"]]) for r in rows]

    # --- Loading helpers ------------------------------------------------------

    async def _load_children(self, pks: list[int]):
        items: dict[int, list[OrderItem]] = defaultdict(list)
        logs: dict[int, list[StatusLogEntry]] = defaultdict(list)

        item_rows = await self._session.execute(
            select(order_items)
            .where(order_items.c.order_id.in_(pks))
            .order_by(order_items.c.id)
        )
        for r in item_rows.mappings():
            items[r["order_id"]].append(
                OrderItem(
                    product_id=r["product_id"],
                    product_name=r["product_name"],
                    quantity=Quantity(r["quantity"]),
                    unit_price=Money(Decimal(r["price"])).rounded(),
                )
            )

        log_rows = await self._session.execute(
            select(order_status_logs)
            .where(order_status_logs.c.order_id.in_(pks))
            .order_by(order_status_logs.c.created_at, order_status_logs.c.id)
        )
        for r in log_rows.mappings():
            logs[r["order_id"]].append(
                StatusLogEntry(
                    status=OrderStatus(r["status"]),
                    note=r["note"],
                    created_at=_aware(r["created_at"]),
                )
            )
        return items, logs

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(order: Order) -> dict:
        address = order.shipping_address
        return {
            "order_id": str(order.order_id),
            "user_id": order.user_id,
            "customer_email": order.customer_email,
            "customer_name": order.customer_name,
            "status": order.status.value,
            "subtotal": order.subtotal.amount,
            "shipping": order.shipping.amount,
            "tax": order.tax.amount,
            "total": order.total.amount,
            "shipping_name": address.full_name,
            "shipping_address": address.address,
            "shipping_city": address.city,
            "shipping_state": address.state,
            "shipping_zip": address.zip_code,
            "shipping_country": address.country,
            "payment_method": order.payment_method,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
        }

    @staticmethod
    def _to_domain(row, items: list[OrderItem], logs: list[StatusLogEntry]) -> Order:
        return Order(
            order_id=OrderId(row["order_id"]),
            user_id=row["user_id"],
            items=items,
            subtotal=_money(row["subtotal"]),
            shipping=_money(row["shipping"]),
            tax=_money(row["tax"]),
            total=_money(row["total"]),
            shipping_address=ShippingAddress(
                full_name=row["shipping_name"],
                address=row["shipping_address"],
                city=row["shipping_city"],
                state=row["shipping_state"],
                zip_code=row["shipping_zip"],
                country=row["shipping_country"],
            ),
            payment_method=row["payment_method"],
            customer_email=row["customer_email"],
            customer_name=row["customer_name"],
            status=OrderStatus(row["status"]),
            status_log=logs,
            created_at=_aware(row["created_at"]),
            updated_at=_aware(row["updated_at"]),
        )


def _money(value) -> Money:
    return Money(Decimal(value)).rounded()


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
