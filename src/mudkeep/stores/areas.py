"""Area store for mudkeep."""

from collections.abc import Mapping
from typing import Any

import structlog

from mudkeep.errors import AlreadyExists, ErrorCode, NotFound, ValidationMismatch
from mudkeep.keys import (
    AREA_CODE_FIELD,
    AREA_SIZE_FIELD,
    AREAS_KEY,
    build_area_code,
    extract_area_code,
)
from mudkeep.kv import KeyValueStore
from mudkeep.models import Area

logger = structlog.get_logger(__name__)

# Fields owned by the store, never taken from an update payload
_PROTECTED_FIELDS = (AREA_CODE_FIELD, AREA_SIZE_FIELD)


class AreaStore:
    """
    CRUD over area records and the global ``AREAS`` index.

    Area codes may be passed raw (``KDV``) or qualified (``AREAS:KDV``).
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def create_area(self, area_code: str, data: Mapping[str, Any]) -> bool:
        """
        Create an area.

        Example area data:
            {
                "areacode": "KDV",
                "name": "Kobold Valley",
                "description": "A valley filled with dangerous Kobolds.",
                "size": 0,
            }

        Args:
            area_code: The area code to create
            data: Area fields. ``areacode`` is optional but must match area_code
                when given; ``size`` defaults to 0.

        Returns:
            True once the area is stored

        Raises:
            ValidationMismatch: If data["areacode"] differs from area_code
            AlreadyExists: If the area is already in the index
        """
        code = extract_area_code(area_code)
        area = dict(data)

        if AREA_CODE_FIELD in area and area[AREA_CODE_FIELD] != code:
            raise ValidationMismatch(
                ErrorCode.CREATE_AREACODE_MISMATCH,
                f"Area code '{code}' does not match payload areacode '{area[AREA_CODE_FIELD]}'",
            )
        area.setdefault(AREA_CODE_FIELD, code)
        area.setdefault(AREA_SIZE_FIELD, 0)

        if await self.area_exists(code):
            raise AlreadyExists(ErrorCode.AREA_ALREADY_EXISTS, f"Area '{code}' already exists")

        await self._store.batch().hset(build_area_code(code), area).sadd(AREAS_KEY, code).execute()

        logger.info("area_created", areacode=code)
        return True

    async def set_area(self, area_code: str, data: Mapping[str, Any]) -> Area:
        """
        Update an area's fields.

        ``areacode`` and ``size`` are stripped from the payload; they are
        managed by the store.

        Args:
            area_code: The area to update
            data: Fields to overwrite

        Returns:
            The area as stored after the update

        Raises:
            NotFound: If the area does not exist
        """
        code = extract_area_code(area_code)
        patch = {field: value for field, value in data.items() if field not in _PROTECTED_FIELDS}

        if not await self.area_exists(code):
            raise NotFound(
                ErrorCode.UPDATE_AREACODE_NO_EXIST, f"Area '{code}' does not exist"
            )

        if patch:
            await self._store.hset(build_area_code(code), patch)
            logger.info("area_updated", areacode=code, fields=sorted(patch))

        area = await self.get_area(code)
        if area is None:
            # Indexed but its hash is gone; report it the same as a missing area
            raise NotFound(ErrorCode.UPDATE_AREACODE_NO_EXIST, f"Area '{code}' does not exist")
        return area

    async def get_areas(self) -> set[str]:
        """Get the codes of every area."""
        return await self._store.smembers(AREAS_KEY)

    async def get_area(self, area_code: str) -> Area | None:
        """
        Get an area.

        Args:
            area_code: The area to fetch

        Returns:
            The area with ``size`` as an int, or None if it doesn't exist
        """
        data = await self._store.hgetall(build_area_code(area_code))
        if not data:
            return None
        data.setdefault(AREA_CODE_FIELD, extract_area_code(area_code))
        return Area.model_validate(data)

    async def area_exists(self, area_code: str) -> bool:
        """Check whether an area is in the area index."""
        return await self._store.sismember(AREAS_KEY, extract_area_code(area_code))

    async def delete_area(self, area_code: str) -> bool:
        """
        Delete an area's record and remove it from the index in one batch.

        Rooms are not touched; deleting the last room of an area already
        deletes the area.

        Returns:
            True once the batch has run
        """
        code = extract_area_code(area_code)
        await self._store.batch().srem(AREAS_KEY, code).delete(build_area_code(code)).execute()

        logger.info("area_deleted", areacode=code)
        return True
