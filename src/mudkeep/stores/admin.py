"""
Read-only lookup tables for world builders.

Rooms are enumerated by walking room numbers ``1..size`` for each area, and
each listed room is keyed and labelled by the number walked. Rooms deleted
from the middle of a live area leave holes that are skipped, and since
deletion also lowers ``size`` the highest-numbered rooms of such an area fall
outside the walk.
"""

from typing import Any

import structlog

from mudkeep.errors import EmptyReport, ErrorCode
from mudkeep.keys import (
    AREA_SIZE_FIELD,
    AREAS_KEY,
    ROOM_NAME_FIELD,
    build_area_code,
    build_room_code,
    extract_area_code,
)
from mudkeep.kv import Batch, KeyValueStore

logger = structlog.get_logger(__name__)


def _parse_size(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def _label(room_number: int, name: str | None) -> str:
    return f"{room_number}: {name or ''}"


def _queue_room(query: Batch, room_code: str) -> None:
    # Two results per room: whether it exists, then its name
    query.exists(room_code).hget(room_code, ROOM_NAME_FIELD)


class AdminLookup:
    """Batch queries turning room data into human-readable lookup tables."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def get_room_lookup_table_by_area(self, area_code: str) -> dict[str, str]:
        """
        Map each room code in an area to a ``"<number>: <name>"`` label.

        Args:
            area_code: The area to list

        Returns:
            Room code to label, e.g. {"RM:GCV:1": "1: Cave Entrance"}

        Raises:
            EmptyReport: If the area has no rooms (or doesn't exist)
        """
        code = extract_area_code(area_code)
        (raw_size,) = await self._store.hmget(build_area_code(code), AREA_SIZE_FIELD)
        size = _parse_size(raw_size)
        if size == 0:
            raise EmptyReport(ErrorCode.ADMIN_AREA_NO_ROOMS, f"Area '{code}' has no rooms")

        room_codes = [build_room_code(code, number) for number in range(1, size + 1)]
        query = self._store.batch()
        for room_code in room_codes:
            _queue_room(query, room_code)
        results = await query.execute()

        lookup: dict[str, str] = {}
        for index, room_code in enumerate(room_codes):
            found, name = results[2 * index], results[2 * index + 1]
            if found:
                lookup[room_code] = _label(index + 1, name)

        logger.debug("room_lookup_built", areacode=code, rooms=len(lookup))
        return lookup

    async def get_all_rooms_lookup_table(self) -> dict[str, dict[str, str]]:
        """
        Build room lookup tables for every area.

        Three round trips: the area index, every area's size in one batch, and
        every room in one further batch.

        Returns:
            Area code to {room code: label}. Areas without rooms are left out.
        """
        area_codes = sorted(await self._store.smembers(AREAS_KEY))
        if not area_codes:
            return {}

        size_query = self._store.batch()
        for code in area_codes:
            size_query.hmget(build_area_code(code), AREA_SIZE_FIELD)
        sizes = await size_query.execute()

        slots: list[tuple[str, int]] = [
            (code, number)
            for code, (raw_size,) in zip(area_codes, sizes)
            for number in range(1, _parse_size(raw_size) + 1)
        ]
        room_query = self._store.batch()
        for code, number in slots:
            _queue_room(room_query, build_room_code(code, number))
        results = await room_query.execute()

        lookup: dict[str, dict[str, str]] = {}
        for index, (code, number) in enumerate(slots):
            found, name = results[2 * index], results[2 * index + 1]
            if found:
                table = lookup.setdefault(code, {})
                table[build_room_code(code, number)] = _label(number, name)

        logger.debug("all_rooms_lookup_built", areas=len(lookup))
        return lookup
