"""
User Management Repositories

Repository interface for user persistence.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import User


class UserRepository(ABC):
    """Abstract repository interface for user persistence."""

    @abstractmethod
    def create(self, user: User) -> User:
        """
        Persist a new user and assign its ID.

        Args:
            user: User without an ID

        Returns:
            The stored user, with ID set

        Raises:
            DuplicatedEmailError: If the store already holds the email
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, user_id: int) -> Optional[User]:
        """
        Retrieve a user by ID.

        Returns:
            User if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """
        Retrieve a user by email.

        Returns:
            User if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def update(self, user: User) -> User:
        """
        Save changes to an existing user.

        Returns:
            The stored user
        """
        pass  # pragma: no cover
