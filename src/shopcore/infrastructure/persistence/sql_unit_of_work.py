"""SQL unit of work: one AsyncSession, one transaction per use case."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopcore.domain.exceptions import InternalError
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.infrastructure.persistence.database import Database
from shopcore.infrastructure.persistence.sql_cart_repository import SqlCartRepository
from shopcore.infrastructure.persistence.sql_inventory_ledger import SqlInventoryLedger
from shopcore.infrastructure.persistence.sql_order_store import SqlOrderStore


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, database: Database) -> None:
        self._database = database
        self._session: AsyncSession | None = None

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await super().__aexit__(exc_type, exc, tb)
        if isinstance(exc, SQLAlchemyError):
            raise InternalError("Unexpected persistence failure") from exc

    async def _begin(self) -> None:
        self._session = self._database.session()
        self.products = SqlInventoryLedger(self._session)
        self.orders = SqlOrderStore(self._session)
        self.carts = SqlCartRepository(self._session)

    async def _close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        await self._require_session().commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise InternalError("Unit of work used outside 'async with'")
        return self._session
