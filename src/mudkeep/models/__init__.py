"""Record models for mudkeep."""

from mudkeep.models.area import Area
from mudkeep.models.character import Character
from mudkeep.models.room import DeleteStatus, Room
from mudkeep.models.user import User

__all__ = [
    "Area",
    "Character",
    "DeleteStatus",
    "Room",
    "User",
]
