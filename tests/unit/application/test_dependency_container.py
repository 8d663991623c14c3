"""
Unit tests for DependencyContainer.
"""

import threading

import pytest

from application import AccountService, LinkAuthorizer, LinkService, UploadService
from application.account_service import AccountServiceConfig
from application.dependency_container import DependencyContainer, DependencyNotFoundError
from domain.link_management import LinkRepository
from domain.notification import IMailer, ITemplateRenderer
from domain.storage_provider import StorageProviderPool, UserStorageCredentialRepository
from domain.user_management import (
    IAuthenticator,
    IPasswordHasher,
    ITokenGenerator,
    UserRepository,
)
from infrastructure.in_memory_repositories import InMemoryLinkRepository
from tests.fixtures import create_user


class DummyService:
    """Dummy service for testing."""

    def __init__(self, value="default"):
        self.value = value


class DummyConsumer:
    """Service that depends on DummyService."""

    def __init__(self, service: DummyService):
        self.service = service


@pytest.fixture
def container():
    """Create a fresh DependencyContainer for each test."""
    return DependencyContainer()


class TestDependencyContainerResolution:
    """Test service resolution."""

    def test_register_singleton_replaces_previous(self, container):
        container.register_singleton(DummyService, DummyService("first"))
        container.register_singleton(DummyService, DummyService("second"))

        assert container.resolve(DummyService).value == "second"

    def test_singleton_is_shared(self, container):
        service = DummyService()
        container.register_singleton(DummyService, service)

        assert container.resolve(DummyService) is service
        assert container.resolve(DummyService) is service

    def test_transient_is_fresh(self, container):
        container.register_transient(DummyService, lambda: DummyService())

        assert container.resolve(DummyService) is not container.resolve(DummyService)

    def test_nested_resolution(self, container):
        """
        Arrange: Transient factory that resolves another registration
        Act: Resolve the consumer
        Assert: Factory runs outside the lock and gets the singleton
        """
        service = DummyService("inner")
        container.register_singleton(DummyService, service)
        container.register_transient(
            DummyConsumer, lambda: DummyConsumer(container.resolve(DummyService))
        )

        assert container.resolve(DummyConsumer).service is service

    def test_resolve_unregistered_raises(self, container):
        with pytest.raises(DependencyNotFoundError):
            container.resolve(DummyService)

    def test_concurrent_singleton_resolution(self, container):
        service = DummyService()
        container.register_singleton(DummyService, service)
        results = []

        def resolve():
            results.append(container.resolve(DummyService))

        threads = [threading.Thread(target=resolve) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 10
        assert all(result is service for result in results)


class TestDependencyContainerOverrides:
    """Test overrides used by the API tests."""

    def test_override_wins_and_reaches_transients(self, container):
        container.register_singleton(DummyService, DummyService("real"))
        container.register_transient(
            DummyConsumer, lambda: DummyConsumer(container.resolve(DummyService))
        )
        fake = DummyService("fake")

        container.override(DummyService, fake)

        assert container.resolve(DummyService) is fake
        assert container.resolve(DummyConsumer).service is fake

    def test_clear_overrides(self, container):
        real = DummyService("real")
        container.register_singleton(DummyService, real)
        container.override(DummyService, DummyService("fake"))

        container.clear_overrides()

        assert container.resolve(DummyService) is real


class TestApplicationServices:
    """Test the wiring of the application services."""

    @pytest.fixture
    def wired(
        self,
        container,
        user_repository,
        link_repository,
        credential_repository,
        hasher,
        token_generator,
        authenticator,
        mailer,
        template_renderer,
        provider_pool,
    ):
        container.register_singleton(UserRepository, user_repository)
        container.register_singleton(LinkRepository, link_repository)
        container.register_singleton(UserStorageCredentialRepository, credential_repository)
        container.register_singleton(IPasswordHasher, hasher)
        container.register_singleton(ITokenGenerator, token_generator)
        container.register_singleton(IAuthenticator, authenticator)
        container.register_singleton(IMailer, mailer)
        container.register_singleton(ITemplateRenderer, template_renderer)
        container.register_singleton(StorageProviderPool, provider_pool)
        container.register_application_services(
            AccountServiceConfig(recovery_token_expiry_minutes=15)
        )
        return container

    def test_services_resolve_with_registered_collaborators(self, wired, link_repository):
        account_service = wired.resolve(AccountService)
        link_service = wired.resolve(LinkService)

        assert account_service.config.recovery_token_expiry_minutes == 15
        assert link_service.link_repository is link_repository
        assert wired.resolve(LinkAuthorizer).link_service.link_repository is link_repository
        assert wired.resolve(UploadService).link_service.link_repository is link_repository

    def test_services_are_fresh_per_resolution(self, wired):
        assert wired.resolve(LinkService) is not wired.resolve(LinkService)

    def test_override_reaches_services(self, wired):
        """
        Arrange: Wired container
        Act: Override the link repository, create a link through the service
        Assert: The link lands in the overriding repository
        """
        replacement = InMemoryLinkRepository()
        wired.override(LinkRepository, replacement)

        link = wired.resolve(LinkService).create_link(create_user(), "T", "abc")

        assert replacement.get(link.id) is not None

    def test_missing_collaborator_surfaces_on_resolve(self, container):
        container.register_application_services()

        with pytest.raises(DependencyNotFoundError):
            container.resolve(LinkService)
