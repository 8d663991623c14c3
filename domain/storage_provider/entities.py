"""
Storage Provider Entities

Join entity between a user and an external storage account.
"""

from dataclasses import dataclass, field
from typing import Optional

from .value_objects import StorageAccountInfo, StorageProviderCredential


@dataclass
class UserStorageCredential:
    """
    A user's access token on one storage provider, plus cached account info.

    At most one exists per (user_id, provider_id) pair.
    """

    id: Optional[int]
    user_id: int
    provider_id: int
    provider_credential: str = field(repr=False)
    email: str = ""
    photo: str = ""

    @classmethod
    def create(
        cls,
        user_id: int,
        provider_id: int,
        provider_credential: str,
        account_info: StorageAccountInfo,
    ) -> "UserStorageCredential":
        """Factory method for a credential that has not been persisted yet."""
        return cls(
            id=None,
            user_id=user_id,
            provider_id=provider_id,
            provider_credential=provider_credential,
            email=account_info.email,
            photo=account_info.photo,
        )

    def refresh(self, provider_credential: str, account_info: StorageAccountInfo) -> None:
        """Replace the access token and the cached account display fields."""
        self.provider_credential = provider_credential
        self.email = account_info.email
        self.photo = account_info.photo

    def as_provider_credential(self) -> StorageProviderCredential:
        return StorageProviderCredential(user_access_token=self.provider_credential)

    def to_dict(self) -> dict:
        """Convert credential to dictionary for serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "provider_id": self.provider_id,
            "provider_credential": self.provider_credential,
            "email": self.email,
            "photo": self.photo,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserStorageCredential":
        """Create UserStorageCredential from dictionary."""
        return cls(
            id=data.get("id"),
            user_id=data["user_id"],
            provider_id=data["provider_id"],
            provider_credential=data["provider_credential"],
            email=data.get("email", ""),
            photo=data.get("photo", ""),
        )
