"""
Account Application Service

Coordinates account use cases: registration, login, profile changes,
password recovery and storage provider connections.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from domain.errors import (
    DuplicatedEmailError,
    InvalidPasswordError,
    TemplateNotFoundError,
    UserNotFoundError,
)
from domain.notification import IMailer, ITemplateRenderer, MailAddress
from domain.storage_provider import (
    CredentialFilters,
    StorageProviderCredential,
    StorageProviderPool,
    UserStorageCredential,
    UserStorageCredentialRepository,
)
from domain.user_management import (
    IAuthenticator,
    IPasswordHasher,
    ITokenGenerator,
    User,
    UserCredentials,
    UserRepository,
)

logger = logging.getLogger(__name__)

DEFAULT_RECOVERY_TOKEN_EXPIRY_MINUTES = 5
RECOVERY_PLAIN_TEMPLATE = "request_password_recovery.txt"
RECOVERY_HTML_TEMPLATE = "request_password_recovery.html"
RECOVERY_SUBJECT = "Recover Password"


@dataclass(frozen=True)
class AccountServiceConfig:
    """Settings for the password recovery mail."""

    recovery_token_expiry_minutes: int = DEFAULT_RECOVERY_TOKEN_EXPIRY_MINUTES
    recovery_web_url: str = "http://localhost:3000/recover-password"
    sender_email: str = "admin@drophere.link"
    sender_name: str = "Drophere Bot"

    @property
    def recovery_token_expiry(self) -> timedelta:
        minutes = self.recovery_token_expiry_minutes
        if minutes <= 0:
            minutes = DEFAULT_RECOVERY_TOKEN_EXPIRY_MINUTES
        return timedelta(minutes=minutes)

    @property
    def sender(self) -> MailAddress:
        return MailAddress(self.sender_email, self.sender_name)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AccountService:
    """
    Application service for account operations.

    Passwords are hashed before they reach a repository, and neither
    passwords nor tokens are ever written to the log.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        credential_repository: UserStorageCredentialRepository,
        password_hasher: IPasswordHasher,
        token_generator: ITokenGenerator,
        authenticator: IAuthenticator,
        mailer: IMailer,
        template_renderer: ITemplateRenderer,
        provider_pool: StorageProviderPool,
        config: Optional[AccountServiceConfig] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize AccountService with its collaborators.

        Args:
            user_repository: User persistence
            credential_repository: Storage credential persistence
            password_hasher: One-way hasher for account passwords
            token_generator: Source of recovery tokens
            authenticator: Issues login credentials
            mailer: Delivers recovery mail
            template_renderer: Renders recovery mail bodies
            provider_pool: Registered storage providers
            config: Recovery mail settings, defaults if None
            clock: Returns the current time, timezone-aware
        """
        self.user_repository = user_repository
        self.credential_repository = credential_repository
        self.password_hasher = password_hasher
        self.token_generator = token_generator
        self.authenticator = authenticator
        self.mailer = mailer
        self.template_renderer = template_renderer
        self.provider_pool = provider_pool
        self.config = config or AccountServiceConfig()
        self.clock = clock

    def register(self, email: str, name: str, password: str) -> User:
        """
        Register a new account.

        Args:
            email: Account email, must not be registered yet
            name: Display name
            password: Plaintext password

        Returns:
            The stored user

        Raises:
            DuplicatedEmailError: If the email already has an account
            PasswordHashingError: If the password cannot be hashed
        """
        logger.info(f"Registering account for {email}")

        if self.user_repository.get_by_email(email) is not None:
            logger.warning(f"Registration rejected, email already used: {email}")
            raise DuplicatedEmailError(f"Email already registered: {email}")

        hashed_password = self.password_hasher.hash(password)
        user = self.user_repository.create(User.create(email, name, hashed_password))

        logger.info(f"Registered user {user.id}")
        return user

    def authenticate(self, email: str, password: str) -> UserCredentials:
        """
        Verify a login and issue credentials.

        Raises:
            UserNotFoundError: If no account has the email
            InvalidPasswordError: If the password does not match
        """
        user = self._get_user_by_email(email)

        if not self.password_hasher.verify(user.password, password):
            logger.warning(f"Invalid password for user {user.id}")
            raise InvalidPasswordError(f"Invalid password for user {user.id}")

        credentials = self.authenticator.authenticate(user)
        logger.info(f"Issued credentials for user {user.id}")
        return credentials

    def fetch_user(self, user_id: int) -> User:
        """
        Fetch a user by ID.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        user = self.user_repository.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User not found: {user_id}")
        return user

    def update_profile(
        self,
        user_id: int,
        name: Optional[str] = None,
        new_password: Optional[str] = None,
        old_password: Optional[str] = None,
    ) -> User:
        """
        Update a user's name and/or password.

        Changing the password requires the current one. The name is updated
        independently of the password.

        Args:
            user_id: User to update
            name: New display name, unchanged if None
            new_password: New plaintext password, unchanged if None
            old_password: Current plaintext password

        Returns:
            The stored user

        Raises:
            UserNotFoundError: If the user doesn't exist
            InvalidPasswordError: If old_password is missing or wrong
        """
        user = self.fetch_user(user_id)

        if new_password is not None:
            if old_password is None or not self.password_hasher.verify(
                user.password, old_password
            ):
                logger.warning(f"Password change rejected for user {user_id}")
                raise InvalidPasswordError(
                    f"Current password does not match for user {user_id}"
                )
            user.password = self.password_hasher.hash(new_password)

        if name is not None:
            user.name = name

        user = self.user_repository.update(user)
        logger.info(f"Updated profile of user {user_id}")
        return user

    def update_storage_token(self, user_id: int, dropbox_token: Optional[str]) -> User:
        """
        Set the legacy single Dropbox token stored on the user.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        user = self.fetch_user(user_id)
        user.dropbox_token = dropbox_token
        user = self.user_repository.update(user)
        logger.info(f"Updated storage token of user {user_id}")
        return user

    def request_password_recovery(self, email: str) -> None:
        """
        Issue a recovery token and mail it to the account owner.

        A new request overwrites any outstanding token.

        Raises:
            UserNotFoundError: If no account has the email
            TemplateNotFoundError: If a recovery mail template is missing
            MailDeliveryError: If the mail cannot be sent
        """
        user = self._get_user_by_email(email)

        token = self.token_generator.generate()
        expiry = self.clock() + self.config.recovery_token_expiry
        user.issue_recovery_token(token, expiry)
        self.user_repository.update(user)

        values = {
            "Token": token,
            "ResetPasswordLink": (
                f"{self.config.recovery_web_url}?token={token}&email={user.email}"
            ),
        }
        try:
            plain_body = self.template_renderer.render(RECOVERY_PLAIN_TEMPLATE, values)
            html_body = self.template_renderer.render(RECOVERY_HTML_TEMPLATE, values)
        except TemplateNotFoundError as e:
            logger.error(f"Password recovery mail template missing: {str(e)}")
            raise

        self.mailer.send(
            self.config.sender,
            MailAddress(user.email, user.name),
            RECOVERY_SUBJECT,
            plain_body,
            html_body,
        )
        logger.info(f"Sent password recovery mail to user {user.id}")

    def recover_password(self, email: str, token: str, new_password: str) -> None:
        """
        Reset a password using a recovery token.

        Raises:
            UserNotFoundError: If the account is unknown or the token is empty,
                absent or different from the stored one
            TokenExpiredError: If the token matches but has expired
        """
        user = self._get_user_by_email(email)

        try:
            user.verify_recovery_token(token, self.clock())
        except UserNotFoundError:
            logger.warning(f"Recovery token mismatch for user {user.id}")
            raise

        user.password = self.password_hasher.hash(new_password)
        user.clear_recovery_token()
        self.user_repository.update(user)
        logger.info(f"Recovered password of user {user.id}")

    def connect_storage_provider(
        self, user_id: int, provider_id: int, provider_credential: str
    ) -> UserStorageCredential:
        """
        Connect (or reconnect) a storage account for a user.

        Fetches the account's display info from the provider, then creates the
        credential or refreshes the one already stored for the same provider.

        Raises:
            InvalidProviderError: If the provider isn't registered
            UserNotFoundError: If the user doesn't exist
            StorageProviderError: If the provider rejects the access token
        """
        provider = self.provider_pool.get(provider_id)
        user = self.fetch_user(user_id)

        account_info = provider.account_info(
            StorageProviderCredential(user_access_token=provider_credential)
        )

        existing = self.credential_repository.find(
            CredentialFilters.for_owner(user.id, provider_id)
        )
        if existing:
            credential = existing[0]
            credential.refresh(provider_credential, account_info)
            credential = self.credential_repository.update(credential)
            logger.info(f"Refreshed provider {provider_id} credential of user {user.id}")
        else:
            credential = self.credential_repository.create(
                UserStorageCredential.create(
                    user.id, provider_id, provider_credential, account_info
                )
            )
            logger.info(f"Connected provider {provider_id} for user {user.id}")

        return credential

    def disconnect_storage_provider(self, user_id: int, provider_id: int) -> None:
        """
        Remove a user's storage account. Disconnecting twice is not an error.

        Raises:
            InvalidProviderError: If the provider isn't registered
            UserNotFoundError: If the user doesn't exist
        """
        self.provider_pool.get(provider_id)
        user = self.fetch_user(user_id)

        credentials = self.credential_repository.find(
            CredentialFilters.for_owner(user.id, provider_id)
        )
        for credential in credentials:
            self.credential_repository.delete(credential)

        logger.info(f"Disconnected provider {provider_id} for user {user.id}")

    def list_storage_providers(self, user_id: int) -> List[UserStorageCredential]:
        """List the storage accounts a user has connected."""
        return self.credential_repository.find(CredentialFilters.for_owner(user_id))

    def _get_user_by_email(self, email: str) -> User:
        user = self.user_repository.get_by_email(email)
        if user is None:
            logger.warning(f"User not found: {email}")
            raise UserNotFoundError(f"User not found: {email}")
        return user
