"""
Link Application Service

Coordinates drop link use cases: creation, update with three-state
patch fields, deletion, lookup and password checks.
"""

import copy
import logging
from datetime import datetime
from typing import List, Optional

from domain.errors import (
    DuplicatedSlugError,
    LinkNotFoundError,
    StorageCredentialNotFoundError,
)
from domain.link_management import FieldUpdate, Link, LinkRepository
from domain.storage_provider import (
    CredentialFilters,
    StorageProviderPool,
    UserStorageCredential,
    UserStorageCredentialRepository,
)
from domain.user_management import IPasswordHasher, User

logger = logging.getLogger(__name__)


class LinkService:
    """
    Application service for drop link operations.

    Slugs are unique across all links. Passwords are hashed before storage;
    an empty password hash marks an unprotected link.
    """

    def __init__(
        self,
        link_repository: LinkRepository,
        credential_repository: UserStorageCredentialRepository,
        password_hasher: IPasswordHasher,
        provider_pool: StorageProviderPool,
    ):
        """
        Initialize LinkService.

        Args:
            link_repository: Link persistence
            credential_repository: Storage credential persistence
            password_hasher: Hasher for link passwords
            provider_pool: Registered storage providers
        """
        self.link_repository = link_repository
        self.credential_repository = credential_repository
        self.password_hasher = password_hasher
        self.provider_pool = provider_pool

    def create_link(
        self,
        owner: User,
        title: str,
        slug: str,
        description: str = "",
        deadline: Optional[datetime] = None,
        password: Optional[str] = None,
        provider_id: Optional[int] = None,
    ) -> Link:
        """
        Create a drop link.

        Args:
            owner: Acting user, becomes the link owner
            title: Link title
            slug: Public slug, must be unused
            description: Free text shown to uploaders
            deadline: Optional moment after which uploads are refused
            password: Optional plaintext password, empty means unprotected
            provider_id: Optional storage provider to bind, ignored if not > 0

        Returns:
            The stored link

        Raises:
            DuplicatedSlugError: If any link already uses the slug
            InvalidProviderError: If provider_id isn't registered
            StorageCredentialNotFoundError: If the owner hasn't connected the provider
        """
        logger.info(f"Creating link '{slug}' for user {owner.id}")

        if self.link_repository.get_by_slug(slug) is not None:
            logger.warning(f"Slug already taken: {slug}")
            raise DuplicatedSlugError(f"Slug already taken: {slug}")

        link = Link.create(owner.id, title, slug, description or "", deadline)

        if password:
            link.password = self.password_hasher.hash(password)

        if provider_id is not None and provider_id > 0:
            link.bind_credential(self._resolve_credential(owner.id, provider_id))

        link = self.link_repository.create(link)
        logger.info(f"Created link {link.id} with slug '{slug}'")
        return self._load_credential(link)

    def update_link(
        self,
        link_id: int,
        title: str,
        slug: str,
        description: Optional[str] = None,
        deadline: Optional[datetime] = None,
        password: FieldUpdate = FieldUpdate.unchanged(),
        provider_id: FieldUpdate = FieldUpdate.unchanged(),
    ) -> Link:
        """
        Update a drop link.

        Title, slug and deadline are always replaced (a None deadline removes
        it). Description is replaced only when given. Password and provider
        follow their FieldUpdate: UNCHANGED keeps, CLEAR removes, SET replaces.
        On any failure the stored link is left as it was.

        Raises:
            LinkNotFoundError: If the link doesn't exist
            DuplicatedSlugError: If another link uses the slug
            InvalidProviderError: If the new provider isn't registered
            StorageCredentialNotFoundError: If the owner hasn't connected it
        """
        logger.info(f"Updating link {link_id}")

        link = copy.deepcopy(self.fetch_link(link_id))

        existing = self.link_repository.get_by_slug(slug)
        if existing is not None and existing.id != link.id:
            logger.warning(f"Slug already taken: {slug}")
            raise DuplicatedSlugError(f"Slug already taken: {slug}")

        link.title = title
        link.slug = slug
        link.deadline = deadline
        if description is not None:
            link.description = description

        if password.is_clear:
            link.password = ""
        elif password.is_set:
            link.password = self.password_hasher.hash(password.value)

        if provider_id.is_clear:
            link.unbind_credential()
        elif provider_id.is_set:
            link.bind_credential(
                self._resolve_credential(link.user_id, provider_id.value)
            )

        link = self.link_repository.update(link)
        logger.info(f"Updated link {link_id}")
        return self._load_credential(link)

    def delete_link(self, link_id: int) -> None:
        """
        Delete a drop link.

        Raises:
            LinkNotFoundError: If the link doesn't exist
        """
        link = self.fetch_link(link_id)
        self.link_repository.delete(link)
        logger.info(f"Deleted link {link_id}")

    def fetch_link(self, link_id: int) -> Link:
        """
        Fetch a link by ID.

        Raises:
            LinkNotFoundError: If the link doesn't exist
        """
        link = self.link_repository.get(link_id)
        if link is None:
            logger.warning(f"Link not found: {link_id}")
            raise LinkNotFoundError(f"Link not found: {link_id}")
        return self._load_credential(link)

    def find_link_by_slug(self, slug: str) -> Link:
        """
        Fetch a link by its public slug.

        Raises:
            LinkNotFoundError: If no link uses the slug
        """
        link = self.link_repository.get_by_slug(slug)
        if link is None:
            logger.warning(f"Link not found for slug: {slug}")
            raise LinkNotFoundError(f"Link not found for slug: {slug}")
        return self._load_credential(link)

    def list_links(self, owner_id: int) -> List[Link]:
        return [
            self._load_credential(link)
            for link in self.link_repository.list_by_user(owner_id)
        ]

    def check_link_password(self, link: Link, password: str) -> bool:
        """
        Check a password against a link.

        Unprotected links accept any input, including the empty string.
        """
        if not link.is_protected():
            return True
        return self.password_hasher.verify(link.password, password)

    def _resolve_credential(self, owner_id: int, provider_id: int) -> UserStorageCredential:
        self.provider_pool.get(provider_id)

        credentials = self.credential_repository.find(
            CredentialFilters(user_ids=[owner_id], provider_ids=[provider_id])
        )
        if not credentials:
            logger.warning(
                f"User {owner_id} has no credential for provider {provider_id}"
            )
            raise StorageCredentialNotFoundError(
                f"No credential for provider {provider_id} and user {owner_id}"
            )
        return credentials[0]

    def _load_credential(self, link: Link) -> Link:
        """Attach the current state of the bound credential, None once it is gone."""
        link.user_storage_credential = None
        if link.user_storage_credential_id is not None:
            link.user_storage_credential = self.credential_repository.get(
                link.user_storage_credential_id
            )
        return link
