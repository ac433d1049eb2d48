"""
Area model for mudkeep.

Defines the Area record stored at ``AREAS:<areacode>``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Area(BaseModel):
    """
    A named zone containing an ordered sequence of rooms.

    Attributes:
        areacode: Unique area identifier (e.g., "KDV")
        name: Display name (e.g., "Kobold Valley")
        description: Long description of the area
        size: Count of rooms reserved in the area, also the last room number handed out
    """

    model_config = ConfigDict(extra="allow")

    areacode: str = Field(..., description="Unique area code")
    name: str = Field(default="", description="Display name of the area")
    description: str = Field(default="", description="Area description")
    size: int = Field(default=0, description="Number of rooms reserved in the area")

    @field_validator("size", mode="before")
    @classmethod
    def _coerce_size(cls, value: Any) -> int:
        # Hash values come back as strings; anything unparseable counts as empty
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0
