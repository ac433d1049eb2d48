"""Stores mapping the world model onto the key-value store."""

from mudkeep.stores.admin import AdminLookup
from mudkeep.stores.areas import AreaStore
from mudkeep.stores.characters import CharacterStore
from mudkeep.stores.rooms import ExitSpec, RoomStore
from mudkeep.stores.users import UserStore
from mudkeep.stores.world import World

__all__ = [
    "AdminLookup",
    "AreaStore",
    "CharacterStore",
    "ExitSpec",
    "RoomStore",
    "UserStore",
    "World",
]
