"""Key-value store contract and backends for mudkeep."""

from mudkeep.kv.base import Batch, Command, KeyValueStore, encode_hash
from mudkeep.kv.engine import create_store, open_store
from mudkeep.kv.redis_store import RedisStore
from mudkeep.kv.sql_store import SQLStore

__all__ = [
    "Batch",
    "Command",
    "KeyValueStore",
    "RedisStore",
    "SQLStore",
    "create_store",
    "encode_hash",
    "open_store",
]
