"""Character model for mudkeep player characters."""

from pydantic import BaseModel, Field


class Character(BaseModel):
    """
    A player character owned by a user.

    Attributes:
        name: Character name, unique across the whole world
        owner: Username of the owning user
        room: Code of the room the character is in
    """

    name: str = Field(..., description="Unique character name")
    owner: str = Field(..., description="Owning username")
    room: str = Field(..., description="Current room code")

    @classmethod
    def default(cls, name: str, owner: str, room: str) -> "Character":
        """Build a freshly created character placed in its starting room."""
        return cls(name=name, owner=owner, room=room)
