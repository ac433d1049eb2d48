"""User model for mudkeep accounts."""

from pydantic import BaseModel, Field


class User(BaseModel):
    """User account holding an opaque password hash."""

    username: str = Field(..., description="Unique username")
    pwhash: str = Field(default="", description="Stored password hash")

    def __repr__(self) -> str:
        """String representation of User without the hash."""
        return f"<User(username='{self.username}')>"
