"""
Redis Storage Credential Repository Implementation

Concrete Redis-based implementation of UserStorageCredentialRepository.
An owner index keyed by "user_id:provider_id" keeps one credential per
pair, and per-user sets serve filtered reads.
"""

import dataclasses
from typing import List, Optional

from domain.errors import PersistenceError
from domain.storage_provider import (
    CredentialFilters,
    UserStorageCredential,
    UserStorageCredentialRepository,
)

from .redis_repository import RedisRepository


class RedisStorageCredentialRepository(UserStorageCredentialRepository):
    """Redis-based implementation of UserStorageCredentialRepository."""

    OWNER_INDEX = "credential_owner"
    ALL_CREDENTIALS = "credentials"

    def __init__(self, redis_repository: RedisRepository):
        self.redis_repo = redis_repository
        self.key_prefix = "credential"

    def _key(self, credential_id: int) -> str:
        return f"{self.key_prefix}:{credential_id}"

    def _user_key(self, user_id: int) -> str:
        return f"user_credentials:{user_id}"

    @staticmethod
    def _owner_value(user_id: int, provider_id: int) -> str:
        return f"{user_id}:{provider_id}"

    def find(self, filters: Optional[CredentialFilters] = None) -> List[UserStorageCredential]:
        filters = filters or CredentialFilters()

        if filters.user_ids is None:
            candidate_ids = self.redis_repo.members(self.ALL_CREDENTIALS)
        else:
            candidate_ids = sorted(
                {
                    credential_id
                    for user_id in filters.user_ids
                    for credential_id in self.redis_repo.members(self._user_key(user_id))
                }
            )

        credentials = []
        for credential_id in candidate_ids:
            credential = self.get(credential_id)
            if credential is not None and filters.matches(
                credential.user_id, credential.provider_id
            ):
                credentials.append(credential)
        return credentials

    def get(self, credential_id: int) -> Optional[UserStorageCredential]:
        data = self.redis_repo.get_json(self._key(credential_id))
        if data is None:
            return None
        return UserStorageCredential.from_dict(data)

    def create(self, credential: UserStorageCredential) -> UserStorageCredential:
        credential_id = self.redis_repo.next_id(self.key_prefix)
        owner = self._owner_value(credential.user_id, credential.provider_id)

        if not self.redis_repo.claim(self.OWNER_INDEX, owner, credential_id):
            raise PersistenceError(
                f"Credential already exists for user {credential.user_id} "
                f"and provider {credential.provider_id}"
            )

        stored = dataclasses.replace(credential, id=credential_id)
        self.redis_repo.set_json(self._key(credential_id), stored.to_dict())
        self.redis_repo.add_member(self.ALL_CREDENTIALS, credential_id)
        self.redis_repo.add_member(self._user_key(credential.user_id), credential_id)
        return stored

    def update(self, credential: UserStorageCredential) -> UserStorageCredential:
        if not self.redis_repo.exists(self._key(credential.id)):
            raise PersistenceError(f"Cannot update missing credential {credential.id}")
        self.redis_repo.set_json(self._key(credential.id), credential.to_dict())
        return credential

    def delete(self, credential: UserStorageCredential) -> bool:
        deleted = self.redis_repo.delete(self._key(credential.id))
        owner = self._owner_value(credential.user_id, credential.provider_id)
        if self.redis_repo.lookup(self.OWNER_INDEX, owner) == credential.id:
            self.redis_repo.release(self.OWNER_INDEX, owner)
        self.redis_repo.remove_member(self.ALL_CREDENTIALS, credential.id)
        self.redis_repo.remove_member(self._user_key(credential.user_id), credential.id)
        return deleted
