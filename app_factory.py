"""
Application Factory

Creates and configures Flask application with all dependencies.
This factory pattern improves testability by allowing dependency injection
and configuration overrides.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from application.account_service import AccountServiceConfig
from application.dependency_container import DependencyContainer
from config.app_config import AppConfig
from config.logging_config import setup_logging
from config.redis_config import (
    RedisConfig,
    get_redis_repository,
    init_redis,
    redis_health_check,
)
from domain.link_management import LinkRepository
from domain.notification import IMailer, ITemplateRenderer
from domain.storage_provider import StorageProviderPool, UserStorageCredentialRepository
from domain.user_management import (
    IAuthenticator,
    IPasswordHasher,
    ITokenGenerator,
    UserRepository,
)
from infrastructure.bcrypt_hasher import BcryptPasswordHasher
from infrastructure.console_mailer import ConsoleMailer
from infrastructure.dropbox_storage_provider import DropboxStorageProvider
from infrastructure.in_memory_repositories import (
    InMemoryLinkRepository,
    InMemoryStorageCredentialRepository,
    InMemoryUserRepository,
)
from infrastructure.jinja_template_renderer import JinjaTemplateRenderer
from infrastructure.jwt_authenticator import JWTAuthenticator
from infrastructure.redis_link_repository import RedisLinkRepository
from infrastructure.redis_storage_credential_repository import (
    RedisStorageCredentialRepository,
)
from infrastructure.redis_user_repository import RedisUserRepository
from infrastructure.sendgrid_mailer import SendGridMailer
from infrastructure.uuid_token_generator import UUIDTokenGenerator

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    container: Optional[DependencyContainer] = None,
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None
        container: Pre-built dependency container, built from config if None

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    setup_logging(config.log_level)

    # Create Flask app
    app = Flask(__name__)
    app.config["RESTX_MASK_SWAGGER"] = False

    # Configure CORS
    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "expose_headers": ["Content-Type"],
                "supports_credentials": True,
                "max_age": 3600,
            }
        },
    )

    if container is None:
        container = build_container(config)

    # Attach container to Flask app context
    app.container = container
    app.app_config = config

    # Register blueprints
    _register_blueprints(app, config)

    # Register health check endpoint
    _register_health_endpoint(app)

    return app


def build_container(config: AppConfig) -> DependencyContainer:
    """
    Wire every adapter and service into a DependencyContainer.

    PATTERN:
    --------
    1. Register repositories for the configured storage backend
    2. Register infrastructure adapters (hasher, tokens, mail, providers)
    3. Register application services
    """
    container = DependencyContainer()

    _register_repositories(container, config)
    _register_adapters(container, config)
    _register_services(container, config)

    logger.info(
        f"Application services initialized with {config.storage_backend} storage"
    )
    return container


def _register_repositories(container: DependencyContainer, config: AppConfig) -> None:
    if config.storage_backend == "memory":
        container.register_singleton(UserRepository, InMemoryUserRepository())
        container.register_singleton(LinkRepository, InMemoryLinkRepository())
        container.register_singleton(
            UserStorageCredentialRepository, InMemoryStorageCredentialRepository()
        )
        return

    if config.storage_backend != "redis":
        raise ValueError(f"Unknown STORAGE_BACKEND: {config.storage_backend}")

    init_redis(RedisConfig())
    redis_repo = get_redis_repository(config.redis_key_prefix)
    container.register_singleton(UserRepository, RedisUserRepository(redis_repo))
    container.register_singleton(LinkRepository, RedisLinkRepository(redis_repo))
    container.register_singleton(
        UserStorageCredentialRepository, RedisStorageCredentialRepository(redis_repo)
    )


def _register_adapters(container: DependencyContainer, config: AppConfig) -> None:
    container.register_singleton(IPasswordHasher, BcryptPasswordHasher())
    container.register_singleton(ITokenGenerator, UUIDTokenGenerator())

    jwt_secret = config.jwt_secret
    if not jwt_secret:
        if config.is_production:
            raise RuntimeError("JWT_SECRET must be set in production")
        jwt_secret = secrets.token_hex(32)
        logger.warning("JWT_SECRET not set, using a random secret for this process")

    container.register_singleton(
        IAuthenticator,
        JWTAuthenticator(
            jwt_secret,
            container.resolve(UserRepository),
            algorithm=config.jwt_algorithm,
            duration=timedelta(hours=config.jwt_duration_hours),
        ),
    )

    if config.mailer_backend == "sendgrid":
        mailer = SendGridMailer(config.sendgrid_api_key)
    else:
        mailer = ConsoleMailer()
    container.register_singleton(IMailer, mailer)
    container.register_singleton(
        ITemplateRenderer, JinjaTemplateRenderer(config.mail_template_path)
    )

    provider_pool = StorageProviderPool()
    provider_pool.register(DropboxStorageProvider(config.storage_root_directory))
    container.register_singleton(StorageProviderPool, provider_pool)


def _register_services(container: DependencyContainer, config: AppConfig) -> None:
    account_config = AccountServiceConfig(
        recovery_token_expiry_minutes=config.recovery_token_expiry_minutes,
        recovery_web_url=config.recovery_web_url,
        sender_email=config.mailer_email,
        sender_name=config.mailer_name,
    )
    container.register_application_services(account_config)


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    """
    Register API blueprints.

    Args:
        app: Flask application
        config: Application configuration
    """
    from api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp)

    logger.info(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of the storage backend.

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "message": "backend ready",
        "storage": app.app_config.storage_backend,
        "redis": "not_configured",
    }

    if app.app_config.storage_backend == "redis":
        if redis_health_check():
            health_status["redis"] = "connected"
        else:
            health_status["redis"] = "disconnected"
            health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.

    Args:
        app: Flask application
    """

    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns overall health status of the application and its dependencies.
        """
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
