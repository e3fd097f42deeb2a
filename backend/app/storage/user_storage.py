"""
User Storage - Persistent storage for registered users.
One JSON file per user plus a username -> user_id index.
"""

import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Dict

import pydantic

from ..models import UserInDB
from .documents import is_valid_id
from .interface import StorageInterface, StorageError

logger = logging.getLogger(__name__)


class UsernameTaken(Exception):
    """Raised when registering a username that already exists."""


class UserStorage:
    """
    Manages persistent storage of user data.
    Uses JSON files for each user stored in data/users/ directory.
    """

    def __init__(self, storage: StorageInterface):
        """
        Initialize user storage.

        Args:
            storage: StorageInterface implementation (typically LocalStorage)
        """
        self.storage = storage
        self.users_dir = "users"
        self._username_index_path = f"{self.users_dir}/username_index.json"
        self._index_lock = asyncio.Lock()

    async def _load_username_index(self) -> Dict[str, str]:
        """Load username to user_id index mapping."""
        content = await self.storage.load(self._username_index_path)
        if content is None:
            return {}
        try:
            return json.loads(content.decode('utf-8'))
        except ValueError as e:
            raise StorageError("Corrupt username index") from e

    async def get_user(self, user_id: str) -> Optional[UserInDB]:
        """
        Get user by user_id.

        Args:
            user_id: User ID

        Returns:
            Optional[UserInDB]: User data or None if not found
        """
        if not is_valid_id(user_id):
            return None
        content = await self.storage.load(f"{self.users_dir}/{user_id}.json")
        if content is None:
            return None
        try:
            return UserInDB.model_validate_json(content)
        except pydantic.ValidationError as e:
            logger.error(f"Corrupt user record {user_id}: {e}")
            raise StorageError(f"Corrupt user record {user_id}") from e

    async def get_user_by_username(self, username: str) -> Optional[UserInDB]:
        """Get user by username via the index."""
        index = await self._load_username_index()
        user_id = index.get(username)
        if user_id is None:
            return None
        return await self.get_user(user_id)

    async def create_user(
        self,
        username: str,
        hashed_password: str,
        email: Optional[str] = None,
        name: Optional[str] = None
    ) -> UserInDB:
        """
        Create a new user.

        Raises:
            UsernameTaken: If the username is already registered
        """
        async with self._index_lock:
            index = await self._load_username_index()
            if username in index:
                raise UsernameTaken(username)

            user = UserInDB(
                user_id=str(uuid.uuid4()),
                username=username,
                email=email,
                name=name,
                hashed_password=hashed_password,
                created_at=datetime.now(timezone.utc),
            )
            await self.storage.save(f"{self.users_dir}/{user.user_id}.json", user.model_dump_json())

            index[username] = user.user_id
            await self.storage.save(self._username_index_path, json.dumps(index, indent=2))

        logger.info(f"Registered user {username}", extra={"extra_fields": {"user_id": user.user_id}})
        return user
