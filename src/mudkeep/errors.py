"""
Error taxonomy for mudkeep stores.

Every domain failure raised by a store carries an ErrorCode so callers can
branch on the failure without parsing messages. Backend failures (lost
connections, SQL errors) are not wrapped and propagate as raised by the client
library.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable failure codes."""

    CREATE_AREACODE_MISMATCH = "create_areacode_mismatch"
    AREA_ALREADY_EXISTS = "area_already_exists"
    UPDATE_AREACODE_NO_EXIST = "update_areacode_no_exist"
    CREATE_BAD_AREACODE = "create_bad_areacode"
    DELETE_ROOM_NO_EXIST = "delete_room_no_exist"
    ROOMS_NOT_CONNECTED = "rooms_not_connected"
    USER_ALREADY_EXISTS = "user_already_exists"
    USER_PASSWORD_NO_MATCH = "user_password_no_match"
    CHARACTER_ALREADY_EXISTS = "character_already_exists"
    ADMIN_AREA_NO_ROOMS = "admin_area_no_rooms"


class MudStoreError(Exception):
    """Base class for all store-level domain failures."""

    def __init__(self, code: ErrorCode, message: str | None = None) -> None:
        self.code = code
        self.message = message or code.value
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code={self.code.value!r}, message={self.message!r})>"


class ValidationMismatch(MudStoreError):
    """Raised when a payload disagrees with the identifiers it is stored under."""


class NotFound(MudStoreError):
    """Raised when the target of an update or delete does not exist."""


class AlreadyExists(MudStoreError):
    """Raised when creating an area, user or character that already exists."""


class BadReference(MudStoreError):
    """Raised when a record refers to a parent that does not exist."""


class PreconditionFailed(MudStoreError):
    """Raised when the stored state does not allow the requested change."""


class CredentialMismatch(MudStoreError):
    """Raised when a password hash does not match the stored one."""


class EmptyReport(MudStoreError):
    """Raised when a report is requested over an empty collection."""
