"""
Link Management Entities

Domain entity for drop links.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..storage_provider.entities import UserStorageCredential


@dataclass
class Link:
    """
    Entity representing a drop link.

    A link is addressed publicly by its slug. It is protected when it holds a
    non-empty password hash and expires once its optional deadline passes.
    Only user_storage_credential_id is persisted; user_storage_credential is
    loaded from the credential store when the link is read.
    """

    id: Optional[int]
    user_id: int
    title: str
    slug: str
    description: str = ""
    password: str = ""
    deadline: Optional[datetime] = None
    user_storage_credential_id: Optional[int] = None
    user_storage_credential: Optional[UserStorageCredential] = field(
        default=None, compare=False
    )

    @classmethod
    def create(
        cls,
        user_id: int,
        title: str,
        slug: str,
        description: str = "",
        deadline: Optional[datetime] = None,
    ) -> "Link":
        """Factory method for a link that has not been persisted yet."""
        return cls(
            id=None,
            user_id=user_id,
            title=title,
            slug=slug,
            description=description,
            deadline=deadline,
        )

    def is_protected(self) -> bool:
        """Check if the link requires a password."""
        return self.password != ""

    def is_expired(self, now: datetime) -> bool:
        """Check if the link's deadline has passed."""
        return self.deadline is not None and now > self.deadline

    def bind_credential(self, credential: UserStorageCredential) -> None:
        self.user_storage_credential_id = credential.id
        self.user_storage_credential = credential

    def unbind_credential(self) -> None:
        self.user_storage_credential_id = None
        self.user_storage_credential = None

    def to_dict(self) -> dict:
        """Convert link to dictionary for serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "password": self.password,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "user_storage_credential_id": self.user_storage_credential_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Link":
        """Create Link from dictionary."""
        return cls(
            id=data.get("id"),
            user_id=data["user_id"],
            title=data["title"],
            slug=data["slug"],
            description=data.get("description", ""),
            password=data.get("password", ""),
            deadline=(
                datetime.fromisoformat(data["deadline"])
                if data.get("deadline")
                else None
            ),
            user_storage_credential_id=data.get("user_storage_credential_id"),
        )
