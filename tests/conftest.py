"""Shared fixtures for all tests."""

from collections.abc import AsyncGenerator

import fakeredis
import pytest

from mudkeep.kv import KeyValueStore, RedisStore, SQLStore
from mudkeep.stores import World

KOBOLD_VALLEY = {
    "areacode": "KDV",
    "name": "Kobold Valley",
    "description": "A valley filled with dangerous Kobolds.",
    "size": 0,
}

GOBLIN_CAVES = {
    "areacode": "GCV",
    "name": "Goblin Caves",
    "description": "A dank network of caves.",
}

OVERLOOK = {
    "name": "Western Overlook",
    "description": "A short cliff overlooks a small, fertile valley.",
}

CAVE_ENTRANCE = {
    "name": "Cave Entrance",
    "description": "The mouth of a cave, reeking of goblin.",
}


@pytest.fixture(params=["redis", "sql"])
async def store(request) -> AsyncGenerator[KeyValueStore, None]:
    """Create an empty store, once per backend."""
    if request.param == "redis":
        client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
        kv: KeyValueStore = RedisStore(client)
    else:
        kv = SQLStore.from_url("sqlite+aiosqlite:///:memory:")

    await kv.initialize()
    yield kv
    await kv.close()


@pytest.fixture
def world(store: KeyValueStore) -> World:
    """Create a world over an empty store."""
    return World(store)


@pytest.fixture
async def kobold_valley(world: World) -> World:
    """Create a world holding the Kobold Valley area without rooms."""
    await world.areas.create_area("KDV", KOBOLD_VALLEY)
    return world


@pytest.fixture
async def two_areas(kobold_valley: World) -> World:
    """Create a world with one room in each of Kobold Valley and Goblin Caves."""
    world = kobold_valley
    await world.areas.create_area("GCV", GOBLIN_CAVES)
    await world.rooms.add_room("KDV", OVERLOOK)
    await world.rooms.add_room("GCV", CAVE_ENTRANCE)
    return world
