"""
Shared pytest fixtures and configuration for the Drophere backend test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Fake collaborators built fresh for every test
- Services wired to in-memory repositories
"""

import pytest

# Hypothesis configuration
from hypothesis import settings, HealthCheck, Phase

from application.account_service import AccountService, AccountServiceConfig
from application.authorization import LinkAuthorizer
from application.link_service import LinkService
from application.upload_service import UploadService
from domain.storage_provider import StorageProviderPool
from infrastructure.in_memory_repositories import (
    InMemoryLinkRepository,
    InMemoryStorageCredentialRepository,
    InMemoryUserRepository,
)
from tests.fixtures import (
    FIXED_NOW,
    DictTemplateRenderer,
    FakeAuthenticator,
    FakeStorageProvider,
    FixedTokenGenerator,
    PlainHasher,
    RecordingMailer,
)

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")


# =============================================================================
# Clock
# =============================================================================

class MutableClock:
    """Clock whose current time tests can move."""

    def __init__(self, now=FIXED_NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock() -> MutableClock:
    """Provide a clock fixed at FIXED_NOW."""
    return MutableClock()


# =============================================================================
# Fake Collaborators
# =============================================================================

@pytest.fixture
def hasher() -> PlainHasher:
    return PlainHasher()


@pytest.fixture
def token_generator() -> FixedTokenGenerator:
    return FixedTokenGenerator("recovery-token-1", "recovery-token-2")


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def template_renderer() -> DictTemplateRenderer:
    return DictTemplateRenderer()


@pytest.fixture
def storage_provider() -> FakeStorageProvider:
    return FakeStorageProvider()


@pytest.fixture
def provider_pool(storage_provider) -> StorageProviderPool:
    pool = StorageProviderPool()
    pool.register(storage_provider)
    return pool


# =============================================================================
# Repositories
# =============================================================================

@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def link_repository() -> InMemoryLinkRepository:
    return InMemoryLinkRepository()


@pytest.fixture
def credential_repository() -> InMemoryStorageCredentialRepository:
    return InMemoryStorageCredentialRepository()


@pytest.fixture
def authenticator(user_repository, clock) -> FakeAuthenticator:
    return FakeAuthenticator(user_repository, now=clock())


# =============================================================================
# Application Services
# =============================================================================

@pytest.fixture
def account_service(
    user_repository,
    credential_repository,
    hasher,
    token_generator,
    authenticator,
    mailer,
    template_renderer,
    provider_pool,
    clock,
) -> AccountService:
    """AccountService wired to in-memory repositories and fakes."""
    return AccountService(
        user_repository=user_repository,
        credential_repository=credential_repository,
        password_hasher=hasher,
        token_generator=token_generator,
        authenticator=authenticator,
        mailer=mailer,
        template_renderer=template_renderer,
        provider_pool=provider_pool,
        config=AccountServiceConfig(
            recovery_web_url="https://drophere.link/recover-password"
        ),
        clock=clock,
    )


@pytest.fixture
def link_service(link_repository, credential_repository, hasher, provider_pool) -> LinkService:
    """LinkService wired to in-memory repositories and fakes."""
    return LinkService(
        link_repository=link_repository,
        credential_repository=credential_repository,
        password_hasher=hasher,
        provider_pool=provider_pool,
    )


@pytest.fixture
def authorizer(link_service) -> LinkAuthorizer:
    return LinkAuthorizer(link_service)


@pytest.fixture
def upload_service(link_service, provider_pool, clock) -> UploadService:
    return UploadService(
        link_service=link_service,
        provider_pool=provider_pool,
        clock=clock,
    )


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require external services)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
