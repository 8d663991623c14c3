"""Infrastructure layer for Redis, security and external services."""

from .redis_repository import RedisRepository, RedisConnectionManager
from .redis_user_repository import RedisUserRepository
from .redis_link_repository import RedisLinkRepository
from .redis_storage_credential_repository import RedisStorageCredentialRepository
from .in_memory_repositories import (
    InMemoryLinkRepository,
    InMemoryStorageCredentialRepository,
    InMemoryUserRepository,
)
from .bcrypt_hasher import BcryptPasswordHasher
from .uuid_token_generator import UUIDTokenGenerator
from .jwt_authenticator import JWTAuthenticator
from .console_mailer import ConsoleMailer
from .sendgrid_mailer import SendGridMailer
from .jinja_template_renderer import JinjaTemplateRenderer
from .dropbox_storage_provider import DropboxStorageProvider

__all__ = [
    'RedisRepository',
    'RedisConnectionManager',
    'RedisUserRepository',
    'RedisLinkRepository',
    'RedisStorageCredentialRepository',
    'InMemoryLinkRepository',
    'InMemoryStorageCredentialRepository',
    'InMemoryUserRepository',
    'BcryptPasswordHasher',
    'UUIDTokenGenerator',
    'JWTAuthenticator',
    'ConsoleMailer',
    'SendGridMailer',
    'JinjaTemplateRenderer',
    'DropboxStorageProvider',
]
