"""
Storage Provider Value Objects

Immutable value objects exchanged with storage provider adapters and
credential repositories.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class StorageProviderCredential:
    """Data needed to call a storage provider's API on a user's behalf."""

    user_access_token: str

    def __repr__(self) -> str:
        # keep tokens out of logs and tracebacks
        return "StorageProviderCredential(user_access_token='***')"


@dataclass(frozen=True)
class StorageAccountInfo:
    """Account display information fetched from a storage provider."""

    email: str = ""
    photo: str = ""


@dataclass(frozen=True)
class CredentialFilters:
    """
    Conjunctive filters for credential queries.

    Each predicate is either None, which matches every credential, or a
    sequence of accepted values. An empty sequence matches nothing.
    """

    user_ids: Optional[Tuple[int, ...]] = None
    provider_ids: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        # normalise lists to tuples so the value object stays hashable
        if self.user_ids is not None:
            object.__setattr__(self, "user_ids", tuple(self.user_ids))
        if self.provider_ids is not None:
            object.__setattr__(self, "provider_ids", tuple(self.provider_ids))

    @classmethod
    def for_owner(cls, user_id: int, provider_id: Optional[int] = None) -> "CredentialFilters":
        """Filters selecting one user's credentials, optionally for one provider."""
        return cls(
            user_ids=(user_id,),
            provider_ids=(provider_id,) if provider_id is not None else None,
        )

    def matches(self, user_id: int, provider_id: int) -> bool:
        """Evaluate the filters against a credential's keys."""
        if self.user_ids is not None and user_id not in self.user_ids:
            return False
        if self.provider_ids is not None and provider_id not in self.provider_ids:
            return False
        return True
