"""
Key-value store contract for mudkeep.

Stores talk to the backend through KeyValueStore: a small set of hash, set and
key commands plus atomic batches. Adapters only implement ``_execute``; result
normalisation lives here so every backend hands stores the same types.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from typing import Any, NamedTuple


class Command(NamedTuple):
    """A single queued store command."""

    name: str
    args: tuple[Any, ...]


def encode_hash(mapping: Mapping[str, Any]) -> dict[str, str]:
    """
    Stringify a mapping for storage as hash fields.

    None values are dropped, since a hash field cannot hold "no value".

    Args:
        mapping: Field name to value

    Returns:
        Field name to string value
    """
    return {str(field): str(value) for field, value in mapping.items() if value is not None}


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


# Per-command conversion from whatever the backend returned
_NORMALIZERS: dict[str, Callable[[Any], Any]] = {
    "hset": int,
    "hgetall": lambda value: {str(k): str(v) for k, v in (value or {}).items()},
    "hget": _optional_str,
    "hmget": lambda value: [_optional_str(item) for item in value],
    "hdel": int,
    "hincrby": int,
    "sadd": int,
    "srem": int,
    "sismember": bool,
    "smembers": lambda value: {str(member) for member in (value or ())},
    "delete": int,
    "exists": lambda value: bool(value),
}


def _normalize(command: Command, value: Any) -> Any:
    return _NORMALIZERS[command.name](value)


def _hset_command(key: str, mapping: Mapping[str, Any]) -> Command:
    fields = encode_hash(mapping)
    if not fields:
        raise ValueError(f"hset on {key!r} needs at least one field")
    return Command("hset", (key, fields))


class Batch:
    """
    A queue of commands executed as one indivisible unit.

    Command methods return the batch so calls can be chained:

        results = await store.batch().hgetall(a).hgetall(b).execute()
    """

    def __init__(self, store: "KeyValueStore") -> None:
        self._store = store
        self._commands: list[Command] = []

    def __len__(self) -> int:
        return len(self._commands)

    def _queue(self, name: str, *args: Any) -> "Batch":
        self._commands.append(Command(name, args))
        return self

    def hset(self, key: str, mapping: Mapping[str, Any]) -> "Batch":
        self._commands.append(_hset_command(key, mapping))
        return self

    def hgetall(self, key: str) -> "Batch":
        return self._queue("hgetall", key)

    def hget(self, key: str, field: str) -> "Batch":
        return self._queue("hget", key, field)

    def hmget(self, key: str, *fields: str) -> "Batch":
        return self._queue("hmget", key, *fields)

    def hdel(self, key: str, *fields: str) -> "Batch":
        return self._queue("hdel", key, *fields)

    def hincrby(self, key: str, field: str, amount: int = 1) -> "Batch":
        return self._queue("hincrby", key, field, amount)

    def sadd(self, key: str, *members: str) -> "Batch":
        return self._queue("sadd", key, *members)

    def srem(self, key: str, *members: str) -> "Batch":
        return self._queue("srem", key, *members)

    def sismember(self, key: str, member: str) -> "Batch":
        return self._queue("sismember", key, member)

    def smembers(self, key: str) -> "Batch":
        return self._queue("smembers", key)

    def delete(self, *keys: str) -> "Batch":
        return self._queue("delete", *keys)

    def exists(self, key: str) -> "Batch":
        return self._queue("exists", key)

    async def execute(self) -> list[Any]:
        """
        Run every queued command atomically.

        Returns:
            Per-command results, in queue order
        """
        if not self._commands:
            return []
        commands = list(self._commands)
        self._commands.clear()
        raw = await self._store._execute(commands, atomic=True)
        return [_normalize(command, value) for command, value in zip(commands, raw)]


class KeyValueStore(ABC):
    """
    Abstract key-value backend.

    Single commands run on their own; use ``batch()`` when several commands must
    be applied without interleaving from other callers.
    """

    @abstractmethod
    async def _execute(self, commands: Sequence[Command], atomic: bool) -> list[Any]:
        """Run commands against the backend and return their raw results in order."""

    async def initialize(self) -> None:
        """Prepare the backend for use. No-op unless the backend needs a schema."""

    @abstractmethod
    async def close(self) -> None:
        """Release the backend's connections."""

    def batch(self) -> Batch:
        """Start a new atomic batch."""
        return Batch(self)

    async def _run(self, command: Command) -> Any:
        (value,) = await self._execute([command], atomic=False)
        return _normalize(command, value)

    # Hashes

    async def hset(self, key: str, mapping: Mapping[str, Any]) -> int:
        return await self._run(_hset_command(key, mapping))

    async def hgetall(self, key: str) -> dict[str, str]:
        return await self._run(Command("hgetall", (key,)))

    async def hget(self, key: str, field: str) -> str | None:
        return await self._run(Command("hget", (key, field)))

    async def hmget(self, key: str, *fields: str) -> list[str | None]:
        return await self._run(Command("hmget", (key, *fields)))

    async def hdel(self, key: str, *fields: str) -> int:
        return await self._run(Command("hdel", (key, *fields)))

    async def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        return await self._run(Command("hincrby", (key, field, amount)))

    # Sets

    async def sadd(self, key: str, *members: str) -> int:
        return await self._run(Command("sadd", (key, *members)))

    async def srem(self, key: str, *members: str) -> int:
        return await self._run(Command("srem", (key, *members)))

    async def sismember(self, key: str, member: str) -> bool:
        return await self._run(Command("sismember", (key, member)))

    async def smembers(self, key: str) -> set[str]:
        return await self._run(Command("smembers", (key,)))

    # Keys

    async def delete(self, *keys: str) -> int:
        return await self._run(Command("delete", keys))

    async def exists(self, key: str) -> bool:
        return await self._run(Command("exists", (key,)))
