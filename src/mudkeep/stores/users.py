"""User store for mudkeep."""

import hmac

import structlog

from mudkeep.errors import AlreadyExists, CredentialMismatch, ErrorCode
from mudkeep.keys import USER_NAME_FIELD, USER_PASSWORD_HASH_FIELD, USERS_KEY, build_user_code
from mudkeep.kv import KeyValueStore
from mudkeep.models import User

logger = structlog.get_logger(__name__)


class UserStore:
    """CRUD over user accounts and the global ``USERS`` index."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def create_user(self, username: str | None, pwhash: str | None) -> bool:
        """
        Create a user account.

        Adding the name to the ``USERS`` index is the existence check: if the
        add reports nothing new, the user already existed and nothing else is
        written.

        Args:
            username: The new user's name
            pwhash: The password hash to store

        Returns:
            True if the user was created, False if any argument is empty

        Raises:
            AlreadyExists: If the username is taken
        """
        if not username or not pwhash:
            return False

        added = await self._store.sadd(USERS_KEY, username)
        if added == 0:
            raise AlreadyExists(ErrorCode.USER_ALREADY_EXISTS, f"User '{username}' already exists")

        user = User(username=username, pwhash=pwhash)
        await self._store.hset(build_user_code(username), user.model_dump())

        logger.info("user_created", username=username)
        return True

    async def get_users(self) -> set[str]:
        """Get every username."""
        return await self._store.smembers(USERS_KEY)

    async def get_user(self, username: str) -> User | None:
        """
        Get a user.

        Returns:
            The user, or None if it doesn't exist
        """
        data = await self._store.hgetall(build_user_code(username))
        if not data:
            return None
        data.setdefault(USER_NAME_FIELD, username)
        return User.model_validate(data)

    async def check_password(self, username: str, pwhash: str) -> bool:
        """
        Check a password hash against the stored one.

        Args:
            username: The user to check
            pwhash: The password hash supplied by the client

        Returns:
            True if the hashes match

        Raises:
            CredentialMismatch: If they differ or the user doesn't exist
        """
        stored = await self._store.hget(build_user_code(username), USER_PASSWORD_HASH_FIELD)

        matches = stored is not None and hmac.compare_digest(
            stored.encode("utf-8"), pwhash.encode("utf-8")
        )
        if not matches:
            logger.info("password_check_failed", username=username)
            raise CredentialMismatch(
                ErrorCode.USER_PASSWORD_NO_MATCH, f"Password hash does not match for '{username}'"
            )

        return True
