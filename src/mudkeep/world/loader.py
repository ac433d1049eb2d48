"""
World loader module for mudkeep.

Handles loading and validating area files from YAML and seeding them into the
store. Each file holds one area and its rooms:

    area:
      areacode: KDV
      name: Kobold Valley
      description: A valley filled with dangerous Kobolds.
    rooms:
      - id: kdv_overlook
        name: Western Overlook
        description: A short cliff overlooks a small, fertile valley.
        exits:
          west: gcv_entrance

Room ids are file-level labels used to wire exits; the store numbers rooms
itself, in file order.
"""

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from mudkeep.keys import (
    AREA_CODE_FIELD,
    AREA_SIZE_FIELD,
    RoomKey,
    build_room_code,
    extract_area_code,
)
from mudkeep.stores import World

logger = structlog.get_logger(__name__)


class WorldLoadError(Exception):
    """Raised when there's an error loading world data."""

    pass


class RoomValidationError(Exception):
    """Raised when room validation fails."""

    pass


class RoomDefinition(BaseModel):
    """A room as written in a world file."""

    id: str = Field(..., description="File-level room label used by exits")
    name: str = Field(..., description="Display name of the room")
    description: str = Field(..., description="Full room description")
    exits: dict[str, str] = Field(
        default_factory=dict, description="Maps command (e.g., 'north') to a room label"
    )


class WorldFile(BaseModel):
    """One area and its rooms, as loaded from a YAML file."""

    area: dict[str, Any] = Field(..., description="Area fields, including areacode")
    rooms: list[RoomDefinition] = Field(default_factory=list)
    source: Path | None = Field(default=None, description="File the data came from")

    @property
    def areacode(self) -> str:
        return extract_area_code(str(self.area[AREA_CODE_FIELD]))


def load_yaml_file(file_path: Path) -> dict[str, Any]:
    """
    Load a YAML world file.

    Args:
        file_path: Path to the YAML file

    Returns:
        The parsed document

    Raises:
        WorldLoadError: If the file cannot be loaded or parsed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise WorldLoadError(f"YAML parsing error in {file_path}: {e}") from e
    except FileNotFoundError as e:
        raise WorldLoadError(f"File not found: {file_path}") from e
    except OSError as e:
        raise WorldLoadError(f"Error loading {file_path}: {e}") from e

    if not data:
        raise WorldLoadError(f"Empty YAML file: {file_path}")

    if not isinstance(data, dict):
        raise WorldLoadError(f"Top level of {file_path} must be a mapping")

    if "area" not in data:
        raise WorldLoadError(f"Missing 'area' key in {file_path}")

    if not isinstance(data["area"], dict) or AREA_CODE_FIELD not in data["area"]:
        raise WorldLoadError(f"'area' must be a mapping with an areacode in {file_path}")

    if not isinstance(data.get("rooms", []), list):
        raise WorldLoadError(f"'rooms' must be a list in {file_path}")

    return data


def validate_room_data(room_data: Any, file_path: Path) -> None:
    """
    Validate that a room entry has all required fields.

    Args:
        room_data: The room entry as parsed from YAML
        file_path: Path to the source file (for error messages)

    Raises:
        RoomValidationError: If required fields are missing or malformed
    """
    if not isinstance(room_data, dict):
        raise RoomValidationError(f"Room entries in {file_path} must be mappings")

    for field in ("id", "name", "description"):
        if field not in room_data:
            room_id = room_data.get("id", "unknown")
            raise RoomValidationError(
                f"Room '{room_id}' in {file_path} missing required field: {field}"
            )

    if "exits" in room_data and not isinstance(room_data["exits"], dict):
        raise RoomValidationError(
            f"Room '{room_data['id']}' in {file_path} has invalid exits (must be a dict)"
        )


def load_world_file(file_path: Path) -> WorldFile:
    """
    Load and validate one world file.

    Raises:
        WorldLoadError: If the file cannot be loaded
        RoomValidationError: If a room entry is invalid
    """
    data = load_yaml_file(file_path)
    rooms = data.get("rooms") or []

    seen: set[str] = set()
    for room_data in rooms:
        validate_room_data(room_data, file_path)
        if room_data["id"] in seen:
            raise RoomValidationError(
                f"Duplicate room ID '{room_data['id']}' found in {file_path}"
            )
        seen.add(room_data["id"])

    try:
        return WorldFile(area=data["area"], rooms=rooms, source=file_path)
    except ValidationError as e:
        raise RoomValidationError(f"Invalid world data in {file_path}: {e}") from e


def load_world_files(directory: Path) -> list[WorldFile]:
    """
    Load every world file in a directory, in file name order.

    Args:
        directory: Path to the directory containing YAML files

    Returns:
        The loaded files

    Raises:
        WorldLoadError: If the directory is missing, holds no YAML, or two
            files define the same area
        RoomValidationError: If room validation fails or a room ID repeats
    """
    if not directory.exists():
        raise WorldLoadError(f"Directory does not exist: {directory}")

    if not directory.is_dir():
        raise WorldLoadError(f"Not a directory: {directory}")

    yaml_files = sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))
    if not yaml_files:
        raise WorldLoadError(f"No YAML files found in {directory}")

    files: list[WorldFile] = []
    areas: set[str] = set()
    room_ids: set[str] = set()

    for yaml_file in yaml_files:
        world_file = load_world_file(yaml_file)

        if world_file.areacode in areas:
            raise WorldLoadError(f"Duplicate area '{world_file.areacode}' found in {yaml_file}")
        areas.add(world_file.areacode)

        for room in world_file.rooms:
            if room.id in room_ids:
                raise RoomValidationError(f"Duplicate room ID '{room.id}' found in {yaml_file}")
            room_ids.add(room.id)

        files.append(world_file)

    return files


def get_reverse_direction(direction: str) -> str | None:
    """
    Get the reverse of a direction.

    Args:
        direction: The original direction (e.g., "north")

    Returns:
        The reverse direction (e.g., "south"), or None if not found
    """
    reverse_map = {
        "north": "south",
        "south": "north",
        "east": "west",
        "west": "east",
        "northeast": "southwest",
        "northwest": "southeast",
        "southeast": "northwest",
        "southwest": "northeast",
        "up": "down",
        "down": "up",
        "in": "out",
        "out": "in",
    }
    return reverse_map.get(direction.lower())


def validate_exits(files: list[WorldFile]) -> list[str]:
    """
    Validate that all exits point to known rooms and come back.

    Args:
        files: Loaded world files

    Returns:
        List of warning messages (non-critical issues)

    Raises:
        RoomValidationError: If an exit leads to an unknown room ID
    """
    rooms = {room.id: room for world_file in files for room in world_file.rooms}
    warnings: list[str] = []

    for room_id, room in rooms.items():
        for direction, target_id in room.exits.items():
            if target_id not in rooms:
                raise RoomValidationError(
                    f"Room '{room_id}' has exit '{direction}' to non-existent room '{target_id}'"
                )

            target = rooms[target_id]
            reverse = get_reverse_direction(direction)

            if reverse and reverse not in target.exits:
                warnings.append(
                    f"Non-bidirectional exit: '{room_id}' -> '{direction}' -> '{target_id}', "
                    f"but '{target_id}' has no '{reverse}' exit back"
                )
            elif reverse and target.exits.get(reverse) != room_id:
                warnings.append(
                    f"Mismatched bidirectional exit: "
                    f"'{room_id}' -> '{direction}' -> '{target_id}', "
                    f"but '{target_id}' '{reverse}' points to '{target.exits[reverse]}'"
                )

    return warnings


async def seed_world(world: World, files: list[WorldFile]) -> dict[str, str]:
    """
    Write loaded world files into the store.

    Areas are created first, then rooms in file order, then every exit. The
    areas must not exist yet.

    Args:
        world: The world to seed
        files: Loaded world files

    Returns:
        Dictionary mapping room ID to the stored room code

    Raises:
        RoomValidationError: If an exit leads to an unknown room ID
        AlreadyExists: If one of the areas is already stored
    """
    for warning in validate_exits(files):
        logger.warning("world_exit_warning", detail=warning)

    room_codes: dict[str, str] = {}

    for world_file in files:
        # Room numbering restarts at 1, whatever size the file declares
        area = {
            field: value
            for field, value in world_file.area.items()
            if field != AREA_SIZE_FIELD
        }
        area[AREA_CODE_FIELD] = world_file.areacode
        await world.areas.create_area(world_file.areacode, area)

        for room in world_file.rooms:
            room_number = await world.rooms.add_room(
                world_file.areacode,
                {"name": room.name, "description": room.description},
            )
            room_codes[room.id] = build_room_code(world_file.areacode, room_number)

    for world_file in files:
        for room in world_file.rooms:
            for command, target_id in room.exits.items():
                await world.rooms.set_connection(
                    command, RoomKey(room_codes[room.id]), RoomKey(room_codes[target_id])
                )

    logger.info(
        "world_seeded",
        areas=len(files),
        rooms=len(room_codes),
    )
    return room_codes
