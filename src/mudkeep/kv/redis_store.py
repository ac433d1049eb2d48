"""Redis adapter for the mudkeep key-value contract."""

from collections.abc import Sequence
from typing import Any

import structlog
from redis.asyncio import Redis
from redis.asyncio.client import Pipeline

from .base import Command, KeyValueStore

logger = structlog.get_logger(__name__)


class RedisStore(KeyValueStore):
    """
    KeyValueStore backed by a Redis server.

    Atomic batches are sent as MULTI/EXEC pipelines, so Redis applies them
    without interleaving commands from other clients.
    """

    def __init__(self, client: Redis) -> None:
        """
        Wrap an existing client.

        Args:
            client: A redis.asyncio client created with ``decode_responses=True``
        """
        self._client = client

    @classmethod
    def from_url(cls, url: str, socket_timeout: float | None = None) -> "RedisStore":
        """
        Create a store connected to the given Redis URL.

        Args:
            url: Redis connection URL (e.g., "redis://localhost:6379/0")
            socket_timeout: Per-command socket timeout in seconds

        Returns:
            A new RedisStore
        """
        client = Redis.from_url(url, decode_responses=True, socket_timeout=socket_timeout)
        return cls(client)

    @property
    def client(self) -> Redis:
        """The underlying redis client."""
        return self._client

    @staticmethod
    def _queue(pipe: Pipeline, command: Command) -> None:
        if command.name == "hset":
            key, mapping = command.args
            pipe.hset(key, mapping=mapping)
        else:
            getattr(pipe, command.name)(*command.args)

    async def _execute(self, commands: Sequence[Command], atomic: bool) -> list[Any]:
        async with self._client.pipeline(transaction=atomic) as pipe:
            for command in commands:
                self._queue(pipe, command)
            return await pipe.execute()

    async def close(self) -> None:
        await self._client.aclose()
        logger.debug("redis_store_closed")
