"""Collection store capability used by the purge workflow.

The purger only needs to list collections, count their documents, and
delete every document in one of them. :class:`SqlAlchemyCollectionStore`
provides that over any SQLAlchemy async engine, treating tables as
collections and rows as documents.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from sqlalchemy import MetaData, Table, func, select

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

DEFAULT_EXCLUDED_TABLES: frozenset[str] = frozenset({"alembic_version"})


class CollectionStore(Protocol):
    """Minimal capability a store must offer to be purged."""

    async def list_collections(self) -> list[str]: ...

    async def count_documents(self, name: str) -> int: ...

    async def delete_all(self, name: str) -> int: ...


class SqlAlchemyCollectionStore:
    """Collection store backed by a reflected SQLAlchemy database.

    Tables are listed dependents-first (reverse foreign-key order) so that
    deleting them in list order never trips a foreign-key constraint.

    Args:
        engine: Connected async engine.
        schema: Database schema to reflect, or None for the default.
        exclude: Table names that are bookkeeping rather than data.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        *,
        schema: str | None = None,
        exclude: frozenset[str] = DEFAULT_EXCLUDED_TABLES,
    ) -> None:
        self._engine = engine
        self._schema = schema
        self._exclude = exclude
        self._tables: dict[str, Table] = {}

    async def _reflect(self) -> None:
        metadata = MetaData(schema=self._schema)
        async with self._engine.connect() as conn:
            await conn.run_sync(metadata.reflect)
        self._tables = {
            table.name: table for table in reversed(metadata.sorted_tables) if table.name not in self._exclude
        }

    async def _table(self, name: str) -> Table:
        if name not in self._tables:
            await self._reflect()
        try:
            return self._tables[name]
        except KeyError:
            msg = f"Unknown collection: {name}"
            raise LookupError(msg) from None

    async def list_collections(self) -> list[str]:
        await self._reflect()
        return list(self._tables)

    async def count_documents(self, name: str) -> int:
        table = await self._table(name)
        async with self._engine.connect() as conn:
            result = await conn.execute(select(func.count()).select_from(table))
            return result.scalar_one()

    async def delete_all(self, name: str) -> int:
        table = await self._table(name)
        async with self._engine.begin() as conn:
            result = await conn.execute(table.delete())
            return result.rowcount or 0
