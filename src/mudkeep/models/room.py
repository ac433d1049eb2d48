"""
Room model for mudkeep.

Defines the Room record stored at ``RM:<areacode>:<roomnumber>`` together with
its exit table, and the status codes returned by room deletion.
"""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field

from mudkeep.keys import RoomDescriptor, build_room_code


class DeleteStatus(IntEnum):
    """Outcome of deleting a room."""

    OK = 0
    AREA_DELETED = 101  # the last room went and took the area with it


class Room(BaseModel):
    """
    A location within an area.

    Attributes:
        areacode: Raw code of the owning area (e.g., "KDV")
        roomnumber: Number of the room within its area, starting at 1
        name: Display name shown to players
        description: Full text description
        exits: Maps command (e.g., "north") to destination room code, or None
            when the room has no exits at all
    """

    model_config = ConfigDict(extra="allow")

    areacode: str = Field(..., description="Owning area code")
    roomnumber: int = Field(..., description="Room number within the area")
    name: str = Field(default="", description="Display name of the room")
    description: str = Field(default="", description="Full room description")
    exits: dict[str, str] | None = Field(
        default=None, description="Maps command (e.g., 'north') to room code"
    )

    @property
    def code(self) -> str:
        """The room code (``RM:<areacode>:<roomnumber>``)."""
        return build_room_code(self.areacode, self.roomnumber)

    @property
    def ref(self) -> RoomDescriptor:
        """A reference to this room usable by the room store."""
        return RoomDescriptor(self.areacode, self.roomnumber)

    def get_exit(self, command: str) -> str | None:
        """
        Get the destination room code for an exit command.

        Args:
            command: The exit command (e.g., "north")

        Returns:
            The destination room code if the exit exists, None otherwise
        """
        if not self.exits:
            return None
        return self.exits.get(command)
