"""
Key codec for mudkeep.

Codes are the colon-delimited identifiers used to store records in the
key-value store. Every function here is pure and never touches the store.

Key layout:
    AREAS                          set of area codes
    AREAS:<areacode>               area hash
    RM:<areacode>:<roomnumber>     room hash
    RM:<areacode>:<roomnumber>:EX  room exit table (command -> room code)
    USERS                          set of usernames
    USER:<username>                user hash
    USER:<username>:CH             set of character names owned by the user
    CHARACTERS                     set of character names
    CHAR:<charactername>           character hash
"""

from dataclasses import dataclass
from typing import Any, TypeAlias

SEPARATOR = ":"

AREAS_KEY = "AREAS"
ROOMS_KEY = "RM"
ROOMS_EXIT_KEY = "EX"
USERS_KEY = "USERS"
USER_KEY = "USER"
USER_CHARACTERS_KEY = "CH"
CHARACTERS_KEY = "CHARACTERS"
CHARACTER_KEY = "CHAR"

AREA_PREFIX = AREAS_KEY + SEPARATOR

# Hash field names
AREA_CODE_FIELD = "areacode"
AREA_SIZE_FIELD = "size"
ROOM_NUMBER_FIELD = "roomnumber"
ROOM_NAME_FIELD = "name"
ROOM_EXITS_FIELD = "exits"
USER_NAME_FIELD = "username"
USER_PASSWORD_HASH_FIELD = "pwhash"
CHARACTER_ROOM_FIELD = "room"


def build_code(*parts: Any) -> str:
    """
    Join the string form of every part with colons.

    Args:
        *parts: Values castable to str

    Returns:
        The joined code
    """
    return SEPARATOR.join(str(part) for part in parts)


def build_area_code(area_code: str) -> str:
    """
    Build a fully-qualified area code.

    Codes that already start with ``AREAS:`` are returned unchanged, so raw
    and qualified codes can be passed interchangeably.

    Args:
        area_code: Raw (``KDV``) or qualified (``AREAS:KDV``) area code

    Returns:
        The qualified area code
    """
    if area_code.startswith(AREA_PREFIX):
        return area_code
    return build_code(AREAS_KEY, area_code)


def extract_area_code(area_code: str) -> str:
    """
    Strip the ``AREAS:`` namespace from an area code, if present.

    Args:
        area_code: Raw or qualified area code

    Returns:
        The raw area code
    """
    if area_code.startswith(AREA_PREFIX):
        return area_code[len(AREA_PREFIX) :]
    return area_code


def _require_room_number(room_number: Any) -> int:
    # bool is an int subclass but never a room number
    if not isinstance(room_number, int) or isinstance(room_number, bool):
        raise TypeError(f"room number must be an int, got {type(room_number).__name__}")
    return room_number


def build_room_code(area_code: str, room_number: int) -> str:
    """
    Build a room code.

    Args:
        area_code: The room's raw area code
        room_number: The room's number

    Returns:
        The room code (``RM:<areacode>:<roomnumber>``)

    Raises:
        TypeError: If room_number is not an int
    """
    return build_code(ROOMS_KEY, area_code, _require_room_number(room_number))


def build_room_exits_code(area_code: str, room_number: int) -> str:
    """
    Build the exit table code of a room.

    Raises:
        TypeError: If room_number is not an int
    """
    return build_code(ROOMS_KEY, area_code, _require_room_number(room_number), ROOMS_EXIT_KEY)


def convert_room_to_exits_code(room_code: str) -> str:
    """Convert a room code to the code of its exit table."""
    return build_code(room_code, ROOMS_EXIT_KEY)


def build_user_code(username: str) -> str:
    """Build a user hash code."""
    return build_code(USER_KEY, username)


def build_user_character_code(username: str) -> str:
    """Build the code of the set of characters owned by a user."""
    return build_code(USER_KEY, username, USER_CHARACTERS_KEY)


def build_character_code(character_name: str) -> str:
    """Build a character hash code."""
    return build_code(CHARACTER_KEY, character_name)


@dataclass(frozen=True)
class RoomKey:
    """A room referenced by its full room code (``RM:KDV:1``)."""

    code: str


@dataclass(frozen=True)
class RoomDescriptor:
    """A room referenced by area code and room number."""

    area_code: str
    room_number: int

    @property
    def code(self) -> str:
        return build_room_code(extract_area_code(self.area_code), self.room_number)


RoomRef: TypeAlias = RoomKey | RoomDescriptor


def resolve_room_ref(ref: RoomRef) -> str:
    """
    Resolve a room reference to its canonical room code.

    Args:
        ref: A RoomKey or RoomDescriptor

    Returns:
        The room code

    Raises:
        TypeError: If ref is neither a RoomKey nor a RoomDescriptor
    """
    if isinstance(ref, (RoomKey, RoomDescriptor)):
        return ref.code
    raise TypeError(f"No room code could be built from {ref!r}")
