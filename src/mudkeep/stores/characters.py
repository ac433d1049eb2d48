"""Character store for mudkeep."""

import structlog

from mudkeep.errors import AlreadyExists, ErrorCode
from mudkeep.keys import (
    CHARACTER_ROOM_FIELD,
    CHARACTERS_KEY,
    RoomRef,
    build_character_code,
    build_user_character_code,
    resolve_room_ref,
)
from mudkeep.kv import KeyValueStore
from mudkeep.models import Character

logger = structlog.get_logger(__name__)


def _room_code(room: str | RoomRef) -> str:
    return room if isinstance(room, str) else resolve_room_ref(room)


class CharacterStore:
    """
    CRUD over characters.

    Character names are tracked in the global ``CHARACTERS`` set and in the
    owning user's ``USER:<username>:CH`` set.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def create_character(
        self,
        username: str | None,
        charactername: str | None,
        default_room: str | RoomRef | None,
    ) -> bool:
        """
        Create a character for a user, placed in its starting room.

        Args:
            username: The owning user's name
            charactername: The new character's name
            default_room: Room code or reference of the starting room

        Returns:
            True if the character was created, False if any argument is empty

        Raises:
            AlreadyExists: If the name is taken globally or by this user
        """
        if not username or not charactername or not default_room:
            return False

        user_characters_code = build_user_character_code(username)
        taken_globally, taken_by_user = await (
            self._store.batch()
            .sismember(CHARACTERS_KEY, charactername)
            .sismember(user_characters_code, charactername)
            .execute()
        )
        if taken_globally or taken_by_user:
            raise AlreadyExists(
                ErrorCode.CHARACTER_ALREADY_EXISTS,
                f"Character '{charactername}' already exists",
            )

        character = Character.default(charactername, username, _room_code(default_room))
        await (
            self._store.batch()
            .sadd(CHARACTERS_KEY, charactername)
            .sadd(user_characters_code, charactername)
            .hset(build_character_code(charactername), character.model_dump())
            .execute()
        )

        logger.info(
            "character_created",
            charactername=charactername,
            username=username,
            room=character.room,
        )
        return True

    async def get_characters(self) -> set[str]:
        """Get every character name."""
        return await self._store.smembers(CHARACTERS_KEY)

    async def get_characters_for_user(self, username: str) -> set[str]:
        """Get the names of the characters a user owns."""
        return await self._store.smembers(build_user_character_code(username))

    async def get_character(self, charactername: str) -> Character | None:
        """
        Get a character.

        Returns:
            The character, or None if it doesn't exist
        """
        data = await self._store.hgetall(build_character_code(charactername))
        if not data:
            return None
        return Character.model_validate(data)

    async def update_character_room(self, charactername: str, new_room: str | RoomRef) -> None:
        """
        Move a character to another room.

        Only the ``room`` field is written.

        Args:
            charactername: The character to move
            new_room: Room code or reference of the destination
        """
        room_code = _room_code(new_room)
        await self._store.hset(
            build_character_code(charactername), {CHARACTER_ROOM_FIELD: room_code}
        )
        logger.debug("character_room_updated", charactername=charactername, room=room_code)
