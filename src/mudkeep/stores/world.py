"""World facade bundling every store on one key-value handle."""

from mudkeep.kv import KeyValueStore

from .admin import AdminLookup
from .areas import AreaStore
from .characters import CharacterStore
from .rooms import RoomStore
from .users import UserStore


class World:
    """
    Access object for the whole world model.

    Example:
        async with open_store() as store:
            world = World(store)
            await world.areas.create_area("KDV", {"name": "Kobold Valley"})
            room_number = await world.rooms.add_room("KDV", {"name": "Western Overlook"})
    """

    def __init__(self, store: KeyValueStore) -> None:
        """
        Build every store on the same handle.

        Args:
            store: The key-value store all records live in
        """
        self.store = store
        self.areas = AreaStore(store)
        self.rooms = RoomStore(store)
        self.characters = CharacterStore(store)
        self.users = UserStore(store)
        self.admin = AdminLookup(store)
