"""
In-Memory Repository Implementations

Process-local implementations of the repository interfaces, selected with
STORAGE_BACKEND=memory. Entities are deep-copied on the way in and out so
callers never share state with the store.
"""

import copy
import threading
from typing import Dict, List, Optional

from domain.errors import DuplicatedEmailError, DuplicatedSlugError, PersistenceError
from domain.link_management import Link, LinkRepository
from domain.storage_provider import (
    CredentialFilters,
    UserStorageCredential,
    UserStorageCredentialRepository,
)
from domain.user_management import User, UserRepository


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository."""

    def __init__(self):
        self._storage: Dict[int, User] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, user: User) -> User:
        with self._lock:
            if any(u.email == user.email for u in self._storage.values()):
                raise DuplicatedEmailError(f"Email already registered: {user.email}")
            stored = copy.deepcopy(user)
            stored.id = self._next_id
            self._next_id += 1
            self._storage[stored.id] = stored
            return copy.deepcopy(stored)

    def get(self, user_id: int) -> Optional[User]:
        user = self._storage.get(user_id)
        return copy.deepcopy(user) if user else None

    def get_by_email(self, email: str) -> Optional[User]:
        for user in self._storage.values():
            if user.email == email:
                return copy.deepcopy(user)
        return None

    def update(self, user: User) -> User:
        with self._lock:
            if user.id not in self._storage:
                raise PersistenceError(f"Cannot update missing user {user.id}")
            if any(
                u.email == user.email and u.id != user.id
                for u in self._storage.values()
            ):
                raise DuplicatedEmailError(f"Email already registered: {user.email}")
            self._storage[user.id] = copy.deepcopy(user)
            return copy.deepcopy(user)


class InMemoryLinkRepository(LinkRepository):
    """In-memory implementation of LinkRepository."""

    def __init__(self):
        self._storage: Dict[int, Link] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    @staticmethod
    def _detach(link: Link) -> Link:
        stored = copy.deepcopy(link)
        stored.user_storage_credential = None
        return stored

    def _slug_taken(self, slug: str, link_id: Optional[int]) -> bool:
        return any(
            other.slug == slug and other.id != link_id
            for other in self._storage.values()
        )

    def create(self, link: Link) -> Link:
        with self._lock:
            if self._slug_taken(link.slug, None):
                raise DuplicatedSlugError(f"Slug already taken: {link.slug}")
            stored = self._detach(link)
            stored.id = self._next_id
            self._next_id += 1
            self._storage[stored.id] = stored
            return copy.deepcopy(stored)

    def get(self, link_id: int) -> Optional[Link]:
        link = self._storage.get(link_id)
        return copy.deepcopy(link) if link else None

    def get_by_slug(self, slug: str) -> Optional[Link]:
        for link in self._storage.values():
            if link.slug == slug:
                return copy.deepcopy(link)
        return None

    def list_by_user(self, user_id: int) -> List[Link]:
        return [
            copy.deepcopy(link)
            for link_id, link in sorted(self._storage.items())
            if link.user_id == user_id
        ]

    def update(self, link: Link) -> Link:
        with self._lock:
            if link.id not in self._storage:
                raise PersistenceError(f"Cannot update missing link {link.id}")
            if self._slug_taken(link.slug, link.id):
                raise DuplicatedSlugError(f"Slug already taken: {link.slug}")
            self._storage[link.id] = self._detach(link)
            return self._detach(link)

    def delete(self, link: Link) -> bool:
        with self._lock:
            return self._storage.pop(link.id, None) is not None


class InMemoryStorageCredentialRepository(UserStorageCredentialRepository):
    """In-memory implementation of UserStorageCredentialRepository."""

    def __init__(self):
        self._storage: Dict[int, UserStorageCredential] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def find(self, filters: Optional[CredentialFilters] = None) -> List[UserStorageCredential]:
        filters = filters or CredentialFilters()
        return [
            copy.deepcopy(credential)
            for credential_id, credential in sorted(self._storage.items())
            if filters.matches(credential.user_id, credential.provider_id)
        ]

    def get(self, credential_id: int) -> Optional[UserStorageCredential]:
        credential = self._storage.get(credential_id)
        return copy.deepcopy(credential) if credential else None

    def create(self, credential: UserStorageCredential) -> UserStorageCredential:
        with self._lock:
            if any(
                c.user_id == credential.user_id and c.provider_id == credential.provider_id
                for c in self._storage.values()
            ):
                raise PersistenceError(
                    f"Credential already exists for user {credential.user_id} "
                    f"and provider {credential.provider_id}"
                )
            stored = copy.deepcopy(credential)
            stored.id = self._next_id
            self._next_id += 1
            self._storage[stored.id] = stored
            return copy.deepcopy(stored)

    def update(self, credential: UserStorageCredential) -> UserStorageCredential:
        with self._lock:
            if credential.id not in self._storage:
                raise PersistenceError(f"Cannot update missing credential {credential.id}")
            self._storage[credential.id] = copy.deepcopy(credential)
            return copy.deepcopy(credential)

    def delete(self, credential: UserStorageCredential) -> bool:
        with self._lock:
            return self._storage.pop(credential.id, None) is not None
