"""SQLAlchemy adapter for the mudkeep key-value contract."""

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .base import Command, KeyValueStore
from .tables import Base, HashField, SetMember

logger = structlog.get_logger(__name__)

hash_fields = HashField.__table__
set_members = SetMember.__table__


class SQLStore(KeyValueStore):
    """
    KeyValueStore backed by two SQL tables.

    Hashes live in ``kv_hash_fields`` as one row per field and sets in
    ``kv_set_members`` as one row per member. Every call runs in its own
    transaction, and calls are serialised through a lock so a batch never sees
    another caller's writes half-applied.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        """
        Wrap an existing async engine.

        Args:
            engine: The async SQLAlchemy engine to store records in
        """
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._lock = asyncio.Lock()

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "SQLStore":
        """
        Create a store for the given database URL.

        Args:
            url: SQLAlchemy async URL (e.g., "sqlite+aiosqlite:///./data/mudkeep.db")
            echo: Log SQL statements

        Returns:
            A new SQLStore
        """
        kwargs: dict[str, Any] = {"echo": echo, "future": True}

        if url.startswith("sqlite"):
            if ":memory:" in url or url.endswith("://"):
                # One shared connection, or every session would see an empty database
                kwargs["poolclass"] = StaticPool
            else:
                db_path = url.split("///")[-1]
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        return cls(create_async_engine(url, **kwargs))

    @property
    def engine(self) -> AsyncEngine:
        """The underlying async engine."""
        return self._engine

    async def initialize(self) -> None:
        """Create the key-value tables if they don't exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.debug("sql_store_initialized", url=str(self._engine.url))

    async def close(self) -> None:
        await self._engine.dispose()
        logger.debug("sql_store_closed")

    async def _execute(self, commands: Sequence[Command], atomic: bool) -> list[Any]:
        async with self._lock:
            async with self._session_factory() as session:
                async with session.begin():
                    results = []
                    for command in commands:
                        handler = getattr(self, f"_{command.name}")
                        results.append(await handler(session, *command.args))
                    return results

    # Hashes

    async def _hget(self, session: AsyncSession, key: str, field: str) -> str | None:
        return await session.scalar(
            select(hash_fields.c.value).where(
                hash_fields.c.key == key, hash_fields.c.field == field
            )
        )

    async def _hset(self, session: AsyncSession, key: str, mapping: dict[str, str]) -> int:
        added = 0
        for field, value in mapping.items():
            result = await session.execute(
                update(hash_fields)
                .where(hash_fields.c.key == key, hash_fields.c.field == field)
                .values(value=value)
            )
            if result.rowcount == 0:
                await session.execute(insert(hash_fields).values(key=key, field=field, value=value))
                added += 1
        return added

    async def _hgetall(self, session: AsyncSession, key: str) -> dict[str, str]:
        result = await session.execute(
            select(hash_fields.c.field, hash_fields.c.value).where(hash_fields.c.key == key)
        )
        return {field: value for field, value in result}

    async def _hmget(self, session: AsyncSession, key: str, *fields: str) -> list[str | None]:
        return [await self._hget(session, key, field) for field in fields]

    async def _hdel(self, session: AsyncSession, key: str, *fields: str) -> int:
        result = await session.execute(
            delete(hash_fields).where(hash_fields.c.key == key, hash_fields.c.field.in_(fields))
        )
        return result.rowcount

    async def _hincrby(self, session: AsyncSession, key: str, field: str, amount: int) -> int:
        current = await self._hget(session, key, field)
        try:
            value = int(current or 0) + amount
        except ValueError:
            raise ValueError(f"hash value is not an integer: {key} {field}") from None
        await self._hset(session, key, {field: str(value)})
        return value

    # Sets

    async def _sismember(self, session: AsyncSession, key: str, member: str) -> bool:
        found = await session.scalar(
            select(set_members.c.member).where(
                set_members.c.key == key, set_members.c.member == member
            )
        )
        return found is not None

    async def _sadd(self, session: AsyncSession, key: str, *members: str) -> int:
        added = 0
        for member in dict.fromkeys(members):
            if not await self._sismember(session, key, member):
                await session.execute(insert(set_members).values(key=key, member=member))
                added += 1
        return added

    async def _srem(self, session: AsyncSession, key: str, *members: str) -> int:
        result = await session.execute(
            delete(set_members).where(set_members.c.key == key, set_members.c.member.in_(members))
        )
        return result.rowcount

    async def _smembers(self, session: AsyncSession, key: str) -> set[str]:
        result = await session.scalars(
            select(set_members.c.member).where(set_members.c.key == key)
        )
        return set(result)

    # Keys

    async def _existing_keys(self, session: AsyncSession, keys: Sequence[str]) -> set[str]:
        found: set[str] = set()
        for table in (hash_fields, set_members):
            result = await session.scalars(
                select(table.c.key).where(table.c.key.in_(keys)).distinct()
            )
            found.update(result)
        return found

    async def _delete(self, session: AsyncSession, *keys: str) -> int:
        existing = await self._existing_keys(session, keys)
        for table in (hash_fields, set_members):
            await session.execute(delete(table).where(table.c.key.in_(keys)))
        return len(existing)

    async def _exists(self, session: AsyncSession, key: str) -> bool:
        return bool(await self._existing_keys(session, [key]))
