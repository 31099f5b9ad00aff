"""Async engine and session factory.

One ``Database`` is built by the composition root and injected into
every unit of work; nothing here is module-global.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from shopcore.infrastructure.config import Settings
from shopcore.infrastructure.persistence.tables import metadata

logger = logging.getLogger(__name__)


class Database:

    def __init__(self, settings: Settings) -> None:
        engine_kwargs: dict[str, object] = {"echo": settings.db_echo}
        if settings.is_sqlite:
            _ensure_sqlite_dir(settings.database_url)
            # writers queue on the database lock instead of failing fast
            engine_kwargs["connect_args"] = {"timeout": 30}
        else:
            engine_kwargs.update(
                {
                    "pool_pre_ping": True,
                    "pool_size": settings.db_pool_size,
                    "max_overflow": settings.db_max_overflow,
                }
            )
        self._engine: AsyncEngine = create_async_engine(
            settings.database_url, **engine_kwargs
        )
        self._session_factory = async_sessionmaker(
            bind=self._engine, class_=AsyncSession, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def session(self) -> AsyncSession:
        return self._session_factory()

    async def create_all(self) -> None:
        """Create missing tables (local runs and tests)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Database schema ready")

    async def dispose(self) -> None:
        await self._engine.dispose()


def _ensure_sqlite_dir(url: str) -> None:
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
