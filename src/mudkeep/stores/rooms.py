"""
Room store for mudkeep.

Rooms are numbered per area by incrementing the area's ``size`` field, which
doubles as the area's room count. Each room's exits live in a separate hash
(``RM:<areacode>:<roomnumber>:EX``) mapping an exit command to the code of the
destination room.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from mudkeep.errors import BadReference, ErrorCode, NotFound, PreconditionFailed
from mudkeep.keys import (
    AREA_CODE_FIELD,
    AREA_SIZE_FIELD,
    AREAS_KEY,
    ROOM_EXITS_FIELD,
    ROOM_NUMBER_FIELD,
    RoomRef,
    build_area_code,
    build_room_code,
    convert_room_to_exits_code,
    extract_area_code,
    resolve_room_ref,
)
from mudkeep.kv import KeyValueStore
from mudkeep.models import DeleteStatus, Room

from .areas import AreaStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ExitSpec:
    """One side of a two-way connection: the room and the command leaving it."""

    source: RoomRef
    command: str


# Fields owned by the store, never taken from a room payload
_PROTECTED_FIELDS = (AREA_CODE_FIELD, ROOM_NUMBER_FIELD, ROOM_EXITS_FIELD)


def _room_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    return {field: value for field, value in data.items() if field not in _PROTECTED_FIELDS}


class RoomStore:
    """CRUD over rooms, room-number allocation and exit tables."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._areas = AreaStore(store)

    async def add_room(self, area_code: str, data: Mapping[str, Any]) -> int:
        """
        Add a room to an area.

        Verifies the area exists, reserves the next room number and writes the
        room with ``areacode`` and ``roomnumber`` filled in.

        Example room data:
            {
                "name": "Western Overlook",
                "description": "A short cliff overlooks a small, fertile valley.",
            }

        Args:
            area_code: The owning area
            data: Room fields; not modified

        Returns:
            The new room's number

        Raises:
            BadReference: If the area does not exist
        """
        code = extract_area_code(area_code)

        if not await self._areas.area_exists(code):
            raise BadReference(ErrorCode.CREATE_BAD_AREACODE, f"Area '{code}' does not exist")

        room_number = await self.reserve_room_number(code)
        await self._write_room(code, room_number, _room_fields(data))

        logger.info("room_added", areacode=code, roomnumber=room_number)
        return room_number

    async def reserve_room_number(self, area_code: str) -> int:
        """
        Reserve the next room number in an area.

        The reservation is permanent: if the follow-up ``set_room`` never
        happens the number stays consumed.

        Args:
            area_code: The area to reserve in

        Returns:
            The reserved room number
        """
        return await self._store.hincrby(build_area_code(area_code), AREA_SIZE_FIELD, 1)

    async def set_room(self, area_code: str, room_number: int, data: Mapping[str, Any]) -> None:
        """
        Write room fields.

        Supplied fields overwrite stored ones; fields not supplied are kept.
        ``exits`` is ignored, use the connection methods for exits.
        ``areacode`` and ``roomnumber`` are always written from the room's
        key, whatever the payload says.

        Raises:
            TypeError: If room_number is not an int
        """
        fields = _room_fields(data)
        if fields:
            await self._write_room(extract_area_code(area_code), room_number, fields)

    async def _write_room(self, code: str, room_number: int, fields: dict[str, Any]) -> None:
        fields[AREA_CODE_FIELD] = code
        fields[ROOM_NUMBER_FIELD] = room_number
        await self._store.hset(build_room_code(code, room_number), fields)

    async def get_room(self, area_code: str, room_number: int) -> Room | None:
        """
        Get a room with its exits.

        The room hash and its exit table are read in one batch.

        Args:
            area_code: The room's area
            room_number: The room's number

        Returns:
            The room, or None if it doesn't exist. ``exits`` is None when the
            room has no exits.
        """
        code = extract_area_code(area_code)
        room_code = build_room_code(code, room_number)

        data, exits = await (
            self._store.batch()
            .hgetall(room_code)
            .hgetall(convert_room_to_exits_code(room_code))
            .execute()
        )
        if not data:
            return None

        data.setdefault(AREA_CODE_FIELD, code)
        data.setdefault(ROOM_NUMBER_FIELD, str(room_number))
        room = Room.model_validate(data)
        if exits:
            room.exits = exits
        return room

    async def delete_room(self, area_code: str, room_number: int) -> DeleteStatus:
        """
        Delete a room and its exit table.

        The area's size is decremented afterwards. When it reaches 0 the area
        itself is deleted and AREA_DELETED is returned, so callers must check
        the status. Rooms left behind by an already deleted area are removed
        without touching any area record.

        Exits in other rooms that lead here are left in place.

        Returns:
            DeleteStatus.OK, or DeleteStatus.AREA_DELETED if the area went too

        Raises:
            NotFound: If the room does not exist
        """
        code = extract_area_code(area_code)
        room_code = build_room_code(code, room_number)

        removed, _, area_indexed = await (
            self._store.batch()
            .delete(room_code)
            .delete(convert_room_to_exits_code(room_code))
            .sismember(AREAS_KEY, code)
            .execute()
        )
        if not removed:
            raise NotFound(ErrorCode.DELETE_ROOM_NO_EXIST, f"Room '{room_code}' does not exist")

        if not area_indexed:
            logger.warning("orphan_room_deleted", areacode=code, roomnumber=room_number)
            return DeleteStatus.OK

        size = await self._store.hincrby(build_area_code(code), AREA_SIZE_FIELD, -1)
        logger.info("room_deleted", areacode=code, roomnumber=room_number, area_size=size)

        if size == 0:
            await self._areas.delete_area(code)
            logger.info("area_cascade_deleted", areacode=code)
            return DeleteStatus.AREA_DELETED

        return DeleteStatus.OK

    # Exits

    async def get_exits(self, ref: RoomRef) -> dict[str, str]:
        """Get a room's exit table (empty if it has no exits)."""
        return await self._store.hgetall(convert_room_to_exits_code(resolve_room_ref(ref)))

    async def set_exits(
        self, area_code: str, room_number: int, exits: Mapping[str, str]
    ) -> dict[str, str]:
        """
        Add exits to a room, skipping exits that lead to missing rooms.

        Every destination is checked in one batch before anything is written.

        Args:
            area_code: The room's area
            room_number: The room's number
            exits: Command to destination room code

        Returns:
            The exits that were written
        """
        room_code = build_room_code(extract_area_code(area_code), room_number)
        commands = sorted(exits)

        check = self._store.batch()
        for command in commands:
            check.exists(exits[command])
        found = await check.execute()

        valid = {command: exits[command] for command, ok in zip(commands, found) if ok}
        dropped = sorted(set(commands) - set(valid))
        if dropped:
            logger.warning("room_exits_dropped", room=room_code, commands=dropped)

        if valid:
            await self._store.hset(convert_room_to_exits_code(room_code), valid)
        return valid

    async def set_connection(self, command: str, source: RoomRef, destination: RoomRef) -> None:
        """
        Add a one-way exit from source to destination.

        Args:
            command: The exit command (e.g., "north")
            source: The room the exit leaves from
            destination: The room the exit leads to
        """
        source_code = resolve_room_ref(source)
        destination_code = resolve_room_ref(destination)
        await self._store.hset(
            convert_room_to_exits_code(source_code), {command: destination_code}
        )

    async def unset_connection(self, command: str, source: RoomRef) -> None:
        """Remove one exit from a room."""
        await self._store.hdel(convert_room_to_exits_code(resolve_room_ref(source)), command)

    async def connect_rooms(self, room_a: ExitSpec, room_b: ExitSpec) -> None:
        """
        Connect two rooms both ways in one batch.

        room_a.command leads from room_a to room_b, and room_b.command leads
        back. The caller picks both commands.

        Args:
            room_a: First room and its command towards room_b
            room_b: Second room and its command towards room_a
        """
        code_a = resolve_room_ref(room_a.source)
        code_b = resolve_room_ref(room_b.source)

        await (
            self._store.batch()
            .hset(convert_room_to_exits_code(code_a), {room_a.command: code_b})
            .hset(convert_room_to_exits_code(code_b), {room_b.command: code_a})
            .execute()
        )
        logger.info(
            "rooms_connected",
            room_a=code_a,
            command_a=room_a.command,
            room_b=code_b,
            command_b=room_b.command,
        )

    async def disconnect_rooms(self, room_a: RoomRef, room_b: RoomRef) -> None:
        """
        Remove a two-way connection between two rooms.

        The exit on each side is found by its destination. If either room has
        no exits left afterwards, its exit table disappears and ``get_room``
        returns it without exits.

        Raises:
            PreconditionFailed: If either room has no exit to the other
        """
        code_a = resolve_room_ref(room_a)
        code_b = resolve_room_ref(room_b)
        exits_a_code = convert_room_to_exits_code(code_a)
        exits_b_code = convert_room_to_exits_code(code_b)

        exits_a, exits_b = await (
            self._store.batch().hgetall(exits_a_code).hgetall(exits_b_code).execute()
        )
        command_a = _command_to(exits_a, code_b)
        command_b = _command_to(exits_b, code_a)

        if command_a is None or command_b is None:
            raise PreconditionFailed(
                ErrorCode.ROOMS_NOT_CONNECTED,
                f"Rooms '{code_a}' and '{code_b}' are not a two-way connection",
            )

        await (
            self._store.batch()
            .hdel(exits_a_code, command_a)
            .hdel(exits_b_code, command_b)
            .execute()
        )
        logger.info("rooms_disconnected", room_a=code_a, room_b=code_b)


def _command_to(exits: Mapping[str, str], room_code: str) -> str | None:
    for command, destination in exits.items():
        if destination == room_code:
            return command
    return None
