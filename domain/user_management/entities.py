"""
User Management Entities

Domain entities for account owners and the credentials issued to them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain.errors import TokenExpiredError, UserNotFoundError


@dataclass
class User:
    """
    Entity representing a registered account owner.

    Owns the password-recovery state machine: a recovery token and its
    expiry are always set together or cleared together.
    """

    id: Optional[int]
    email: str
    name: str
    password: str
    dropbox_token: Optional[str] = None
    drive_token: Optional[str] = None
    recover_password_token: Optional[str] = None
    recover_password_token_expiry: Optional[datetime] = None

    def __post_init__(self):
        if (self.recover_password_token is None) != (
            self.recover_password_token_expiry is None
        ):
            raise ValueError(
                "Recovery token and its expiry must be set or cleared together"
            )

    @classmethod
    def create(cls, email: str, name: str, hashed_password: str) -> "User":
        """
        Factory method for a user that has not been persisted yet.

        Args:
            email: Account email
            name: Display name
            hashed_password: Password already processed by the hasher

        Returns:
            New User without an ID
        """
        return cls(id=None, email=email, name=name, password=hashed_password)

    def has_pending_recovery(self) -> bool:
        """Check whether a recovery token is outstanding."""
        return self.recover_password_token is not None

    def issue_recovery_token(self, token: str, expiry: datetime) -> None:
        """
        Store a fresh recovery token, replacing any outstanding one.

        Args:
            token: Opaque token sent to the user
            expiry: Moment after which the token is rejected
        """
        self.recover_password_token = token
        self.recover_password_token_expiry = expiry

    def verify_recovery_token(self, token: str, now: datetime) -> None:
        """
        Check a supplied recovery token against the stored one.

        An empty token, a missing stored token and a mismatch all raise the
        same error so callers cannot tell which case applied.

        Raises:
            UserNotFoundError: If the token is empty, absent or different
            TokenExpiredError: If the token matches but is past its expiry
        """
        if not token or self.recover_password_token != token:
            raise UserNotFoundError(f"No matching recovery token for user {self.id}")

        expiry = self.recover_password_token_expiry
        if expiry is None or now > expiry:
            raise TokenExpiredError(f"Recovery token for user {self.id} has expired")

    def clear_recovery_token(self) -> None:
        """Consume the recovery token."""
        self.recover_password_token = None
        self.recover_password_token_expiry = None

    def to_dict(self) -> dict:
        """Convert user to dictionary for serialization."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "password": self.password,
            "dropbox_token": self.dropbox_token,
            "drive_token": self.drive_token,
            "recover_password_token": self.recover_password_token,
            "recover_password_token_expiry": (
                self.recover_password_token_expiry.isoformat()
                if self.recover_password_token_expiry
                else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Create User from dictionary."""
        return cls(
            id=data.get("id"),
            email=data["email"],
            name=data["name"],
            password=data["password"],
            dropbox_token=data.get("dropbox_token"),
            drive_token=data.get("drive_token"),
            recover_password_token=data.get("recover_password_token"),
            recover_password_token_expiry=(
                datetime.fromisoformat(data["recover_password_token_expiry"])
                if data.get("recover_password_token_expiry")
                else None
            ),
        )


@dataclass(frozen=True)
class UserCredentials:
    """Signed login token handed back after a successful authentication."""

    token: str
    expiry: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "expiry": self.expiry.isoformat() if self.expiry else None,
        }
