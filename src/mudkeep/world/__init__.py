"""World files: loading YAML area definitions and seeding them into the store."""

from .loader import (
    RoomDefinition,
    RoomValidationError,
    WorldFile,
    WorldLoadError,
    load_world_file,
    load_world_files,
    seed_world,
    validate_exits,
)

__all__ = [
    "RoomDefinition",
    "RoomValidationError",
    "WorldFile",
    "WorldLoadError",
    "load_world_file",
    "load_world_files",
    "seed_world",
    "validate_exits",
]
