"""
User Management Domain

Account owners, their password-recovery state and the security
capabilities needed to register and authenticate them.
"""

from .entities import User, UserCredentials
from .repositories import UserRepository
from .security import IAuthenticator, IPasswordHasher, ITokenGenerator

__all__ = [
    "User",
    "UserCredentials",
    "UserRepository",
    "IAuthenticator",
    "IPasswordHasher",
    "ITokenGenerator",
]
