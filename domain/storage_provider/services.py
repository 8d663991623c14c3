"""
Storage Provider Services

Capability interface for external storage providers and the pool that
looks them up by provider ID.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, List

from domain.errors import InvalidProviderError

from .value_objects import StorageAccountInfo, StorageProviderCredential


class IStorageProvider(ABC):
    """
    Abstract interface for an external storage service.

    Domain layer defines the contract, infrastructure provides implementation
    (e.g. Dropbox over HTTP). Implementations should apply short timeouts and
    raise StorageProviderError on failure; they never retry.
    """

    @property
    @abstractmethod
    def provider_id(self) -> int:
        """Numeric identifier the provider is registered under."""
        pass  # pragma: no cover

    @abstractmethod
    def account_info(self, credential: StorageProviderCredential) -> StorageAccountInfo:
        """
        Fetch the account's display information.

        Raises:
            StorageProviderError: If the provider call fails
        """
        pass  # pragma: no cover

    @abstractmethod
    def upload(
        self,
        credential: StorageProviderCredential,
        file_stream: BinaryIO,
        file_name: str,
        slug: str,
    ) -> None:
        """
        Upload a file into the folder reserved for a link.

        Args:
            credential: Access token of the link owner
            file_stream: Readable binary stream
            file_name: Name the file should get on the provider
            slug: Slug of the link the file was dropped into

        Raises:
            StorageProviderError: If the provider rejects the upload
        """
        pass  # pragma: no cover


class StorageProviderPool:
    """
    Registry of storage providers keyed by provider ID.
    """

    def __init__(self):
        self._providers: Dict[int, IStorageProvider] = {}

    def register(self, provider: IStorageProvider) -> None:
        """Register a provider, replacing any provider with the same ID."""
        if provider is not None:
            self._providers[provider.provider_id] = provider

    def get(self, provider_id: int) -> IStorageProvider:
        """
        Look up a provider.

        Raises:
            InvalidProviderError: If no provider is registered under the ID
        """
        provider = self._providers.get(provider_id)
        if provider is None:
            raise InvalidProviderError(f"Invalid storage provider ID: {provider_id}")
        return provider

    def provider_ids(self) -> List[int]:
        return sorted(self._providers)

    def __contains__(self, provider_id: int) -> bool:
        return provider_id in self._providers
