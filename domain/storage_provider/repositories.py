"""
Storage Provider Repositories

Repository interface for user storage credentials.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import UserStorageCredential
from .value_objects import CredentialFilters


class UserStorageCredentialRepository(ABC):
    """Abstract repository interface for storage credential persistence."""

    @abstractmethod
    def find(self, filters: Optional[CredentialFilters] = None) -> List[UserStorageCredential]:
        """
        Find credentials matching all supplied filters.

        Args:
            filters: Conjunctive filters; None matches every credential.
                A filter field set to an empty sequence matches nothing.

        Returns:
            Matching credentials, possibly empty
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, credential_id: int) -> Optional[UserStorageCredential]:
        """
        Retrieve a credential by ID.

        Returns:
            UserStorageCredential if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def create(self, credential: UserStorageCredential) -> UserStorageCredential:
        """Persist a new credential and assign its ID."""
        pass  # pragma: no cover

    @abstractmethod
    def update(self, credential: UserStorageCredential) -> UserStorageCredential:
        """Save changes to an existing credential."""
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, credential: UserStorageCredential) -> bool:
        """
        Delete a credential.

        Returns:
            True if deleted, False if it was already gone
        """
        pass  # pragma: no cover
