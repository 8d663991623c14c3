"""
User Management Security Interfaces

Capability interfaces for secret hashing, opaque token generation and
login credential issuance. Infrastructure provides the implementations
(bcrypt, uuid, JWT), keeping the domain free of those libraries.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import User, UserCredentials


class IPasswordHasher(ABC):
    """One-way hash and verification of secrets."""

    @abstractmethod
    def hash(self, plaintext: str) -> str:
        """
        Hash a secret.

        Raises:
            PasswordHashingError: If the secret cannot be hashed
        """
        pass  # pragma: no cover

    @abstractmethod
    def verify(self, hashed: str, plaintext: str) -> bool:
        """Check a secret against a stored hash. Never raises."""
        pass  # pragma: no cover


class ITokenGenerator(ABC):
    """Source of opaque random tokens."""

    @abstractmethod
    def generate(self) -> str:
        pass  # pragma: no cover


class IAuthenticator(ABC):
    """Issues signed login credentials and resolves them back to users."""

    @abstractmethod
    def authenticate(self, user: User) -> UserCredentials:
        """
        Sign credentials for the user.

        Args:
            user: User whose password has already been verified

        Returns:
            Signed token with optional expiry
        """
        pass  # pragma: no cover

    @abstractmethod
    def resolve_user(self, token: str) -> Optional[User]:
        """
        Resolve a previously issued token back to its user.

        Returns:
            The user, or None if the token is invalid, expired or orphaned
        """
        pass  # pragma: no cover
