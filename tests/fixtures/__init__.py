"""
Test fixtures package.

Provides factory functions and fake collaborators for testing.
"""

from .domain_fixtures import (
    FIXED_NOW,
    create_link,
    create_storage_credential,
    create_user,
    create_user_with_recovery,
)
from .fakes import (
    DictTemplateRenderer,
    FakeAuthenticator,
    FakeStorageProvider,
    FixedTokenGenerator,
    PlainHasher,
    RecordingMailer,
    failing_provider,
)

__all__ = [
    # Domain fixtures
    "FIXED_NOW",
    "create_link",
    "create_storage_credential",
    "create_user",
    "create_user_with_recovery",
    # Fakes
    "DictTemplateRenderer",
    "FakeAuthenticator",
    "FakeStorageProvider",
    "FixedTokenGenerator",
    "PlainHasher",
    "RecordingMailer",
    "failing_provider",
]
