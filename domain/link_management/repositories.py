"""
Link Management Repositories

Repository interface for link persistence.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Link


class LinkRepository(ABC):
    """
    Abstract repository interface for link persistence.

    Only the credential reference is stored; links come back with
    user_storage_credential unset.
    """

    @abstractmethod
    def create(self, link: Link) -> Link:
        """
        Persist a new link and assign its ID.

        Raises:
            DuplicatedSlugError: If the store already holds the slug
        """
        pass  # pragma: no cover

    @abstractmethod
    def get(self, link_id: int) -> Optional[Link]:
        """
        Retrieve a link by ID.

        Returns:
            Link if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Link]:
        """
        Retrieve a link by slug.

        Returns:
            Link if found, None otherwise
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_by_user(self, user_id: int) -> List[Link]:
        """
        List every link owned by a user.

        Returns:
            Links ordered by ID, empty if the user owns none
        """
        pass  # pragma: no cover

    @abstractmethod
    def update(self, link: Link) -> Link:
        """
        Save changes to an existing link.

        Raises:
            DuplicatedSlugError: If the new slug was claimed concurrently
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete(self, link: Link) -> bool:
        """
        Delete a link.

        Returns:
            True if deleted, False if it was already gone
        """
        pass  # pragma: no cover
