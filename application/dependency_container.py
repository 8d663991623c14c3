"""
Dependency Injection Container

Holds the repositories, adapters and application services of the Drophere
backend. Adapters are registered by the application factory; the
application services are wired here from whatever is registered.
"""

import logging
import threading
from typing import Any, Callable, Dict, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised when attempting to resolve an unregistered dependency."""
    pass


class DependencyContainer:
    """
    Registry of shared instances and per-resolution factories.

    Lookup order is override, then singleton, then transient factory.
    Factories run outside the lock so they can resolve their own
    collaborators.
    """

    def __init__(self):
        self._singletons: Dict[Type, Any] = {}
        self._transients: Dict[Type, Callable[[], Any]] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        """
        Share one instance for every resolution of interface.

        Example:
            container.register_singleton(UserRepository, InMemoryUserRepository())
        """
        with self._lock:
            self._singletons[interface] = implementation
        logger.debug(f"Registered singleton: {interface.__name__}")

    def register_transient(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """Build a fresh instance with factory on every resolution of interface."""
        with self._lock:
            self._transients[interface] = factory
        logger.debug(f"Registered transient: {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Resolve a registered dependency.

        Raises:
            DependencyNotFoundError: If nothing is registered for interface
        """
        with self._lock:
            if interface in self._overrides:
                return self._overrides[interface]
            if interface in self._singletons:
                return self._singletons[interface]
            factory = self._transients.get(interface)

        if factory is None:
            raise DependencyNotFoundError(
                f"No registration found for type: {interface.__name__}"
            )
        return factory()

    def override(self, interface: Type[T], implementation: T) -> None:
        """
        Replace interface with implementation until clear_overrides is called.

        Services are transients, so an overridden repository or adapter
        reaches every service resolved afterwards.

        Example:
            container.override(IMailer, recording_mailer)
        """
        with self._lock:
            self._overrides[interface] = implementation
        logger.debug(f"Overridden: {interface.__name__}")

    def clear_overrides(self) -> None:
        with self._lock:
            self._overrides.clear()

    def register_application_services(self, account_config=None) -> None:
        """
        Register AccountService, LinkService, LinkAuthorizer and UploadService.

        Expects the repositories (UserRepository, LinkRepository,
        UserStorageCredentialRepository), the security adapters
        (IPasswordHasher, ITokenGenerator, IAuthenticator), the mail
        adapters (IMailer, ITemplateRenderer) and the StorageProviderPool
        to be registered before a service is resolved.

        Args:
            account_config: AccountServiceConfig, defaults when None
        """
        from domain.link_management import LinkRepository
        from domain.notification import IMailer, ITemplateRenderer
        from domain.storage_provider import (
            StorageProviderPool,
            UserStorageCredentialRepository,
        )
        from domain.user_management import (
            IAuthenticator,
            IPasswordHasher,
            ITokenGenerator,
            UserRepository,
        )

        from .account_service import AccountService, AccountServiceConfig
        from .authorization import LinkAuthorizer
        from .link_service import LinkService
        from .upload_service import UploadService

        account_config = account_config or AccountServiceConfig()

        self.register_transient(
            AccountService,
            lambda: AccountService(
                user_repository=self.resolve(UserRepository),
                credential_repository=self.resolve(UserStorageCredentialRepository),
                password_hasher=self.resolve(IPasswordHasher),
                token_generator=self.resolve(ITokenGenerator),
                authenticator=self.resolve(IAuthenticator),
                mailer=self.resolve(IMailer),
                template_renderer=self.resolve(ITemplateRenderer),
                provider_pool=self.resolve(StorageProviderPool),
                config=account_config,
            ),
        )
        self.register_transient(
            LinkService,
            lambda: LinkService(
                link_repository=self.resolve(LinkRepository),
                credential_repository=self.resolve(UserStorageCredentialRepository),
                password_hasher=self.resolve(IPasswordHasher),
                provider_pool=self.resolve(StorageProviderPool),
            ),
        )
        self.register_transient(
            LinkAuthorizer,
            lambda: LinkAuthorizer(self.resolve(LinkService)),
        )
        self.register_transient(
            UploadService,
            lambda: UploadService(
                link_service=self.resolve(LinkService),
                provider_pool=self.resolve(StorageProviderPool),
            ),
        )
        logger.debug("Registered application services")
