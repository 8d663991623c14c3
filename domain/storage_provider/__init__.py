"""
Storage Provider Domain

External storage accounts a user connects, and the providers behind them.
"""

from .entities import UserStorageCredential
from .repositories import UserStorageCredentialRepository
from .services import IStorageProvider, StorageProviderPool
from .value_objects import CredentialFilters, StorageAccountInfo, StorageProviderCredential

__all__ = [
    "UserStorageCredential",
    "UserStorageCredentialRepository",
    "IStorageProvider",
    "StorageProviderPool",
    "CredentialFilters",
    "StorageAccountInfo",
    "StorageProviderCredential",
]
