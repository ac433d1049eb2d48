"""mudkeep - key-value data-access layer for a multi-user text adventure world."""

from mudkeep.errors import (
    AlreadyExists,
    BadReference,
    CredentialMismatch,
    EmptyReport,
    ErrorCode,
    MudStoreError,
    NotFound,
    PreconditionFailed,
    ValidationMismatch,
)
from mudkeep.keys import RoomDescriptor, RoomKey, RoomRef
from mudkeep.kv import KeyValueStore, RedisStore, SQLStore, create_store, open_store
from mudkeep.models import Area, Character, DeleteStatus, Room, User
from mudkeep.stores import ExitSpec, World

__version__ = "0.1.0"

__all__ = [
    "AlreadyExists",
    "Area",
    "BadReference",
    "Character",
    "CredentialMismatch",
    "DeleteStatus",
    "EmptyReport",
    "ErrorCode",
    "ExitSpec",
    "KeyValueStore",
    "MudStoreError",
    "NotFound",
    "PreconditionFailed",
    "RedisStore",
    "Room",
    "RoomDescriptor",
    "RoomKey",
    "RoomRef",
    "SQLStore",
    "User",
    "ValidationMismatch",
    "World",
    "create_store",
    "open_store",
]
