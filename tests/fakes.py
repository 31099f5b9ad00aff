"""In-memory fakes for testing.

These implement the same abstract interfaces as the SQL repositories
but keep everything in dicts.  The fake unit of work snapshots the
stores on entry and restores them unless ``commit()`` was called, so
rollback behaves like the real transaction.
"""

from __future__ import annotations

import copy

from shopcore.application.notifications import Notifier, OrderEmail
from shopcore.domain.exceptions import EntityNotFoundError, OutOfStockError
from shopcore.domain.model.cart import CartItem
from shopcore.domain.model.order import Order, StatusLogEntry
from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Quantity
from shopcore.domain.repository.cart_repository import CartRepository
from shopcore.domain.repository.inventory_ledger import InventoryLedger, Reservation
from shopcore.domain.repository.order_store import OrderStore
from shopcore.domain.repository.unit_of_work import UnitOfWork


class FakeInventoryLedger(InventoryLedger):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    async def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    async def list_all(self) -> list[Product]:
        return list(self._store.values())

    async def save(self, product: Product) -> None:
        self._store[product.id] = product

    async def reserve(self, product_id: str, quantity: Quantity) -> Reservation:
        # no await between check and decrement, so this is atomic on the loop
        product = self._store.get(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product {product_id} not found")
        if quantity.value > product.stock:
            raise OutOfStockError(product_id, product.name, quantity.value, product.stock)
        product.stock -= quantity.value
        return Reservation(product_id, product.name, quantity, product.price)


class FakeOrderStore(OrderStore):

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}

    async def add(self, order: Order) -> None:
        self._store[str(order.order_id)] = copy.deepcopy(order)

    async def append_status(self, order: Order, entry: StatusLogEntry) -> None:
        stored = self._store[str(order.order_id)]
        stored.status = entry.status
        stored.updated_at = entry.created_at
        stored.status_log.append(entry)

    async def get(self, order_id: str) -> Order | None:
        order = self._store.get(order_id)
        return copy.deepcopy(order) if order else None

    async def list_for_user(self, user_id: str) -> list[Order]:
        owned = [
            (o.created_at, i, o)
            for i, o in enumerate(self._store.values())
            if o.user_id == user_id
        ]
        owned.sort(key=lambda t: t[:2], reverse=True)
        return [copy.deepcopy(o) for _, _, o in owned]

    def all(self) -> list[Order]:
        return list(self._store.values())


class FakeCartRepository(CartRepository):

    def __init__(self, items: list[CartItem] | None = None) -> None:
        self._items: list[CartItem] = list(items or [])

    async def list_for_user(self, user_id: str) -> list[CartItem]:
        return [i for i in self._items if i.user_id == user_id]

    async def replace(self, user_id: str, items: list[CartItem]) -> None:
        await self.clear(user_id)
        self._items.extend(items)

    async def clear(self, user_id: str) -> int:
        before = len(self._items)
        self._items = [i for i in self._items if i.user_id != user_id]
        return before - len(self._items)


class FakeUnitOfWork(UnitOfWork):

    def __init__(
        self,
        products: FakeInventoryLedger,
        orders: FakeOrderStore,
        carts: FakeCartRepository,
    ) -> None:
        self.products = products
        self.orders = orders
        self.carts = carts
        self.commits = 0
        self._snapshot: tuple | None = None

    async def _begin(self) -> None:
        self._snapshot = (
            copy.deepcopy(self.products._store),
            copy.deepcopy(self.orders._store),
            list(self.carts._items),
        )

    async def _close(self) -> None:
        self._snapshot = None

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = None

    async def rollback(self) -> None:
        if self._snapshot is None:
            return
        products, orders, carts = self._snapshot
        # restore in place so handlers holding references see the rollback
        self.products._store.clear()
        self.products._store.update(products)
        self.orders._store.clear()
        self.orders._store.update(orders)
        self.carts._items[:] = carts


class FakeShop:
    """Bundle of fakes sharing one 'database', with a UoW factory."""

    def __init__(
        self,
        products: list[Product] | None = None,
        cart: list[CartItem] | None = None,
    ) -> None:
        self.products = FakeInventoryLedger(products)
        self.orders = FakeOrderStore()
        self.carts = FakeCartRepository(cart)

    def uow(self) -> FakeUnitOfWork:
        return FakeUnitOfWork(self.products, self.orders, self.carts)


class RecordingNotifier(Notifier):

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[OrderEmail] = []
        self._fail = fail

    async def send(self, email: OrderEmail) -> None:
        self.sent.append(email)
        if self._fail:
            raise RuntimeError("mail provider unavailable")


ADDRESS = {
    "fullName": "Ada Lovelace",
    "address": "12 Analytical St",
    "city": "London",
    "state": "LDN",
    "zipCode": "N1 9GU",
}
