"""
Redis User Repository Implementation

Concrete Redis-based implementation of UserRepository. Emails are kept
unique through an index hash claimed with HSETNX.
"""

import dataclasses
from typing import Optional

from domain.errors import DuplicatedEmailError, PersistenceError
from domain.user_management import User, UserRepository

from .redis_repository import RedisRepository


class RedisUserRepository(UserRepository):
    """Redis-based implementation of UserRepository."""

    EMAIL_INDEX = "user_email"

    def __init__(self, redis_repository: RedisRepository):
        """
        Initialize with Redis repository.

        Args:
            redis_repository: RedisRepository instance from infrastructure layer
        """
        self.redis_repo = redis_repository
        self.key_prefix = "user"

    def _key(self, user_id: int) -> str:
        return f"{self.key_prefix}:{user_id}"

    def create(self, user: User) -> User:
        """Store a new user under a fresh ID, claiming its email."""
        user_id = self.redis_repo.next_id(self.key_prefix)

        if not self.redis_repo.claim(self.EMAIL_INDEX, user.email, user_id):
            raise DuplicatedEmailError(f"Email already registered: {user.email}")

        stored = dataclasses.replace(user, id=user_id)
        try:
            self.redis_repo.set_json(self._key(user_id), stored.to_dict())
        except PersistenceError:
            self.redis_repo.release(self.EMAIL_INDEX, user.email)
            raise
        return stored

    def get(self, user_id: int) -> Optional[User]:
        data = self.redis_repo.get_json(self._key(user_id))
        if data is None:
            return None
        return User.from_dict(data)

    def get_by_email(self, email: str) -> Optional[User]:
        user_id = self.redis_repo.lookup(self.EMAIL_INDEX, email)
        if user_id is None:
            return None
        return self.get(user_id)

    def update(self, user: User) -> User:
        """Overwrite a stored user, moving the email claim if it changed."""
        previous = self.get(user.id)
        if previous is None:
            raise PersistenceError(f"Cannot update missing user {user.id}")

        if previous.email != user.email:
            if not self.redis_repo.claim(self.EMAIL_INDEX, user.email, user.id):
                raise DuplicatedEmailError(f"Email already registered: {user.email}")
            self.redis_repo.release(self.EMAIL_INDEX, previous.email)

        self.redis_repo.set_json(self._key(user.id), user.to_dict())
        return user
