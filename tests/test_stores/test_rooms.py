"""Tests for the room store."""

import pytest
from conftest import CAVE_ENTRANCE, OVERLOOK

from mudkeep.errors import BadReference, ErrorCode, NotFound, PreconditionFailed
from mudkeep.keys import RoomDescriptor, RoomKey
from mudkeep.kv import KeyValueStore
from mudkeep.models import DeleteStatus
from mudkeep.stores import ExitSpec, World


class TestAddRoom:
    """Tests for adding rooms."""

    async def test_add_room(self, kobold_valley: World):
        """Test the first room gets number 1 and is readable."""
        room_number = await kobold_valley.rooms.add_room("KDV", OVERLOOK)

        assert room_number == 1
        room = await kobold_valley.rooms.get_room("KDV", 1)
        assert room is not None
        assert room.model_dump(exclude_none=True) == {
            "areacode": "KDV",
            "roomnumber": 1,
            **OVERLOOK,
        }
        assert room.exits is None

    async def test_room_numbers_are_sequential(self, kobold_valley: World):
        """Test rooms are numbered in order and the area size follows."""
        numbers = [
            await kobold_valley.rooms.add_room("KDV", {"name": f"Room {i}"}) for i in range(3)
        ]

        assert numbers == [1, 2, 3]
        area = await kobold_valley.areas.get_area("KDV")
        assert area is not None
        assert area.size == 3

    async def test_add_room_to_missing_area(self, world: World, store: KeyValueStore):
        """Test rooms can't be added to an area that doesn't exist."""
        with pytest.raises(BadReference) as exc_info:
            await world.rooms.add_room("NOPE", OVERLOOK)

        assert exc_info.value.code is ErrorCode.CREATE_BAD_AREACODE
        assert await store.exists("AREAS:NOPE") is False
        assert await store.exists("RM:NOPE:1") is False

    async def test_add_room_drops_exits(self, kobold_valley: World, store: KeyValueStore):
        """Test exits in the payload are never written to the room hash."""
        await kobold_valley.rooms.add_room("KDV", {**OVERLOOK, "exits": {"north": "RM:KDV:2"}})

        assert "exits" not in await store.hgetall("RM:KDV:1")
        assert await store.exists("RM:KDV:1:EX") is False

    async def test_add_room_overrides_identity_fields(self, kobold_valley: World):
        """Test areacode and roomnumber come from the store, not the payload."""
        await kobold_valley.rooms.add_room("KDV", {**OVERLOOK, "areacode": "GCV", "roomnumber": 9})

        room = await kobold_valley.rooms.get_room("KDV", 1)

        assert room is not None
        assert room.areacode == "KDV"
        assert room.roomnumber == 1

    async def test_reserve_room_number(self, kobold_valley: World):
        """Test reserving numbers without writing rooms."""
        assert await kobold_valley.rooms.reserve_room_number("KDV") == 1
        assert await kobold_valley.rooms.reserve_room_number("AREAS:KDV") == 2
        assert await kobold_valley.rooms.get_room("KDV", 1) is None


class TestSetRoom:
    """Tests for writing room fields."""

    async def test_set_room_merges(self, kobold_valley: World):
        """Test supplied fields are overwritten and the rest kept."""
        await kobold_valley.rooms.add_room("KDV", OVERLOOK)

        await kobold_valley.rooms.set_room("KDV", 1, {"name": "Eastern Overlook"})

        room = await kobold_valley.rooms.get_room("KDV", 1)
        assert room is not None
        assert room.name == "Eastern Overlook"
        assert room.description == OVERLOOK["description"]

    async def test_set_room_keeps_identity_fields(self, kobold_valley: World):
        """Test areacode and roomnumber always follow the room's key."""
        await kobold_valley.rooms.add_room("KDV", OVERLOOK)

        await kobold_valley.rooms.set_room(
            "KDV", 1, {"areacode": "GCV", "roomnumber": "first", "name": "Eastern Overlook"}
        )

        room = await kobold_valley.rooms.get_room("KDV", 1)
        assert room is not None
        assert room.areacode == "KDV"
        assert room.roomnumber == 1
        assert room.name == "Eastern Overlook"
        lookup = await kobold_valley.admin.get_room_lookup_table_by_area("KDV")
        assert lookup == {"RM:KDV:1": "1: Eastern Overlook"}

    async def test_set_room_after_reserving(self, kobold_valley: World, store: KeyValueStore):
        """Test a room written after reserving its number carries its identity."""
        room_number = await kobold_valley.rooms.reserve_room_number("KDV")

        await kobold_valley.rooms.set_room("KDV", room_number, {"name": "Western Overlook"})

        assert await store.hgetall("RM:KDV:1") == {
            "areacode": "KDV",
            "roomnumber": "1",
            "name": "Western Overlook",
        }

    async def test_set_room_with_only_identity_fields(
        self, kobold_valley: World, store: KeyValueStore
    ):
        """Test a payload with nothing writable creates no room."""
        await kobold_valley.rooms.set_room("KDV", 4, {"areacode": "KDV", "roomnumber": 4})

        assert await store.exists("RM:KDV:4") is False

    async def test_set_room_requires_int_number(self, kobold_valley: World):
        """Test room numbers must be ints."""
        with pytest.raises(TypeError):
            await kobold_valley.rooms.set_room("KDV", "1", OVERLOOK)  # type: ignore[arg-type]


class TestGetRoom:
    """Tests for reading rooms."""

    async def test_get_missing_room(self, kobold_valley: World):
        """Test missing rooms read as None."""
        assert await kobold_valley.rooms.get_room("KDV", 5) is None

    async def test_get_room_with_exits(self, two_areas: World):
        """Test exits are attached to the room."""
        await two_areas.rooms.set_connection(
            "west", RoomDescriptor("KDV", 1), RoomDescriptor("GCV", 1)
        )

        room = await two_areas.rooms.get_room("KDV", 1)

        assert room is not None
        assert room.exits == {"west": "RM:GCV:1"}
        assert room.get_exit("west") == "RM:GCV:1"
        assert room.get_exit("east") is None

    async def test_room_code_and_ref(self, two_areas: World):
        """Test a room knows its own code and reference."""
        room = await two_areas.rooms.get_room("GCV", 1)

        assert room is not None
        assert room.code == "RM:GCV:1"
        assert room.ref == RoomDescriptor("GCV", 1)


class TestDeleteRoom:
    """Tests for deleting rooms."""

    async def test_delete_room(self, kobold_valley: World, store: KeyValueStore):
        """Test deleting one of several rooms shrinks the area."""
        await kobold_valley.rooms.add_room("KDV", OVERLOOK)
        await kobold_valley.rooms.add_room("KDV", {"name": "Valley Floor"})

        status = await kobold_valley.rooms.delete_room("KDV", 1)

        assert status is DeleteStatus.OK
        assert await kobold_valley.rooms.get_room("KDV", 1) is None
        area = await kobold_valley.areas.get_area("KDV")
        assert area is not None
        assert area.size == 1

    async def test_delete_last_room_deletes_area(
        self, kobold_valley: World, store: KeyValueStore
    ):
        """Test deleting the last room takes the area with it."""
        await kobold_valley.rooms.add_room("KDV", OVERLOOK)

        status = await kobold_valley.rooms.delete_room("KDV", 1)

        assert status is DeleteStatus.AREA_DELETED
        assert status == 101
        assert await kobold_valley.areas.get_area("KDV") is None
        assert await kobold_valley.areas.get_areas() == set()
        assert await store.exists("AREAS:KDV") is False

    async def test_delete_room_removes_exit_table(
        self, two_areas: World, store: KeyValueStore
    ):
        """Test the room's own exits go with it, exits into it stay."""
        await two_areas.rooms.connect_rooms(
            ExitSpec(RoomDescriptor("KDV", 1), "west"),
            ExitSpec(RoomDescriptor("GCV", 1), "east"),
        )
        await two_areas.rooms.add_room("KDV", {"name": "Valley Floor"})

        await two_areas.rooms.delete_room("KDV", 1)

        assert await store.exists("RM:KDV:1:EX") is False
        assert await two_areas.rooms.get_exits(RoomKey("RM:GCV:1")) == {"east": "RM:KDV:1"}

    async def test_delete_room_of_deleted_area(self, kobold_valley: World, store: KeyValueStore):
        """Test a room left behind by a deleted area goes without reviving the area."""
        await kobold_valley.rooms.add_room("KDV", OVERLOOK)
        await kobold_valley.areas.delete_area("KDV")

        status = await kobold_valley.rooms.delete_room("KDV", 1)

        assert status is DeleteStatus.OK
        assert await store.exists("RM:KDV:1") is False
        assert await store.exists("AREAS:KDV") is False
        assert await kobold_valley.areas.get_area("KDV") is None
        assert await kobold_valley.areas.area_exists("KDV") is False

    async def test_delete_missing_room(self, kobold_valley: World):
        """Test deleting a room that doesn't exist leaves the area alone."""
        await kobold_valley.rooms.add_room("KDV", OVERLOOK)

        with pytest.raises(NotFound) as exc_info:
            await kobold_valley.rooms.delete_room("KDV", 7)

        assert exc_info.value.code is ErrorCode.DELETE_ROOM_NO_EXIST
        area = await kobold_valley.areas.get_area("KDV")
        assert area is not None
        assert area.size == 1


class TestConnections:
    """Tests for exits between rooms."""

    async def test_set_and_unset_connection(self, two_areas: World):
        """Test one-way exits."""
        await two_areas.rooms.set_connection("west", RoomKey("RM:KDV:1"), RoomKey("RM:GCV:1"))

        assert await two_areas.rooms.get_exits(RoomKey("RM:KDV:1")) == {"west": "RM:GCV:1"}
        assert await two_areas.rooms.get_exits(RoomKey("RM:GCV:1")) == {}

        await two_areas.rooms.unset_connection("west", RoomKey("RM:KDV:1"))

        assert await two_areas.rooms.get_exits(RoomKey("RM:KDV:1")) == {}

    async def test_set_connection_replaces_command(self, two_areas: World):
        """Test setting a command again points it elsewhere."""
        await two_areas.rooms.add_room("KDV", {"name": "Valley Floor"})
        source = RoomDescriptor("KDV", 1)

        await two_areas.rooms.set_connection("down", source, RoomDescriptor("GCV", 1))
        await two_areas.rooms.set_connection("down", source, RoomDescriptor("KDV", 2))

        assert await two_areas.rooms.get_exits(source) == {"down": "RM:KDV:2"}

    async def test_connect_rooms(self, two_areas: World):
        """Test connecting rooms both ways at once."""
        await two_areas.rooms.connect_rooms(
            ExitSpec(RoomDescriptor("KDV", 1), "west"),
            ExitSpec(RoomKey("RM:GCV:1"), "east"),
        )

        kdv = await two_areas.rooms.get_room("KDV", 1)
        gcv = await two_areas.rooms.get_room("GCV", 1)

        assert kdv is not None and gcv is not None
        assert kdv.exits == {"west": "RM:GCV:1"}
        assert gcv.exits == {"east": "RM:KDV:1"}

    async def test_disconnect_rooms(self, two_areas: World):
        """Test removing a two-way connection."""
        await two_areas.rooms.connect_rooms(
            ExitSpec(RoomDescriptor("KDV", 1), "west"),
            ExitSpec(RoomDescriptor("GCV", 1), "east"),
        )

        await two_areas.rooms.disconnect_rooms(RoomDescriptor("KDV", 1), RoomKey("RM:GCV:1"))

        kdv = await two_areas.rooms.get_room("KDV", 1)
        gcv = await two_areas.rooms.get_room("GCV", 1)
        assert kdv is not None and gcv is not None
        assert kdv.exits is None
        assert gcv.exits is None

    async def test_disconnect_keeps_other_exits(self, two_areas: World):
        """Test only the exits between the two rooms are removed."""
        await two_areas.rooms.add_room("KDV", {"name": "Valley Floor"})
        await two_areas.rooms.connect_rooms(
            ExitSpec(RoomDescriptor("KDV", 1), "west"),
            ExitSpec(RoomDescriptor("GCV", 1), "east"),
        )
        await two_areas.rooms.set_connection(
            "down", RoomDescriptor("KDV", 1), RoomDescriptor("KDV", 2)
        )

        await two_areas.rooms.disconnect_rooms(RoomDescriptor("GCV", 1), RoomDescriptor("KDV", 1))

        assert await two_areas.rooms.get_exits(RoomDescriptor("KDV", 1)) == {"down": "RM:KDV:2"}

    async def test_disconnect_one_way_connection(self, two_areas: World):
        """Test a one-way exit is not a connection and is left alone."""
        await two_areas.rooms.set_connection(
            "west", RoomDescriptor("KDV", 1), RoomDescriptor("GCV", 1)
        )

        with pytest.raises(PreconditionFailed) as exc_info:
            await two_areas.rooms.disconnect_rooms(
                RoomDescriptor("KDV", 1), RoomDescriptor("GCV", 1)
            )

        assert exc_info.value.code is ErrorCode.ROOMS_NOT_CONNECTED
        assert await two_areas.rooms.get_exits(RoomDescriptor("KDV", 1)) == {"west": "RM:GCV:1"}

    async def test_set_exits_skips_missing_rooms(self, two_areas: World):
        """Test exits to rooms that don't exist are dropped."""
        written = await two_areas.rooms.set_exits(
            "KDV", 1, {"west": "RM:GCV:1", "north": "RM:KDV:99"}
        )

        assert written == {"west": "RM:GCV:1"}
        assert await two_areas.rooms.get_exits(RoomDescriptor("KDV", 1)) == {"west": "RM:GCV:1"}

    async def test_set_exits_nothing_valid(self, two_areas: World, store: KeyValueStore):
        """Test nothing is written when every exit is invalid."""
        assert await two_areas.rooms.set_exits("KDV", 1, {"north": "RM:KDV:99"}) == {}
        assert await store.exists("RM:KDV:1:EX") is False

    async def test_room_refs_are_interchangeable(self, two_areas: World):
        """Test a connection made with one reference kind reads through the other."""
        await two_areas.rooms.set_connection(
            "east", RoomKey("RM:GCV:1"), RoomDescriptor("AREAS:KDV", 1)
        )

        assert await two_areas.rooms.get_exits(RoomDescriptor("GCV", 1)) == {
            "east": "RM:KDV:1"
        }

    async def test_cave_room_is_stored(self, two_areas: World):
        """Test the second area's room is independent of the first."""
        room = await two_areas.rooms.get_room("GCV", 1)

        assert room is not None
        assert room.name == CAVE_ENTRANCE["name"]
