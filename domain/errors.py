"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions can have infrastructure concerns like logging.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    USER_NOT_FOUND = "user_not_found"
    LINK_NOT_FOUND = "link_not_found"
    STORAGE_CREDENTIAL_NOT_FOUND = "storage_credential_not_found"
    INVALID_PROVIDER = "invalid_provider"
    DUPLICATED_EMAIL = "duplicated_email"
    DUPLICATED_SLUG = "duplicated_slug"
    INVALID_PASSWORD = "invalid_password"
    TOKEN_EXPIRED = "token_expired"
    LINK_EXPIRED = "link_expired"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    STORAGE_PROVIDER_ERROR = "storage_provider_error"
    MAIL_DELIVERY_FAILED = "mail_delivery_failed"
    CONFIGURATION_ERROR = "configuration_error"
    INVALID_REQUEST = "invalid_request"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.USER_NOT_FOUND: {
        "title": "User Not Found",
        "message": "No account matches the given information.",
        "action": "Check the email address or register a new account.",
    },
    ErrorCategory.LINK_NOT_FOUND: {
        "title": "Link Not Found",
        "message": "The requested drop link does not exist or has been deleted.",
        "action": "Ask the link owner for an up-to-date link.",
    },
    ErrorCategory.STORAGE_CREDENTIAL_NOT_FOUND: {
        "title": "Storage Not Connected",
        "message": "No storage account is connected for the selected provider.",
        "action": "Connect the storage provider from your account settings first.",
    },
    ErrorCategory.INVALID_PROVIDER: {
        "title": "Invalid Storage Provider",
        "message": "The selected storage provider is not supported.",
        "action": "Choose one of the supported storage providers.",
    },
    ErrorCategory.DUPLICATED_EMAIL: {
        "title": "Email Already Registered",
        "message": "An account with this email address already exists.",
        "action": "Log in instead, or recover your password if you forgot it.",
    },
    ErrorCategory.DUPLICATED_SLUG: {
        "title": "Slug Already Taken",
        "message": "Another drop link is already using this slug.",
        "action": "Pick a different slug for your link.",
    },
    ErrorCategory.INVALID_PASSWORD: {
        "title": "Invalid Password",
        "message": "The password you entered is not correct.",
        "action": "Check your password and try again.",
    },
    ErrorCategory.TOKEN_EXPIRED: {
        "title": "Recovery Token Expired",
        "message": "The password recovery token has expired.",
        "action": "Request a new password recovery email.",
    },
    ErrorCategory.LINK_EXPIRED: {
        "title": "Link Expired",
        "message": "The deadline for this drop link has passed.",
        "action": "Ask the link owner to extend the deadline.",
    },
    ErrorCategory.UNAUTHENTICATED: {
        "title": "Authentication Required",
        "message": "You need to be logged in to perform this action.",
        "action": "Log in and try again.",
    },
    ErrorCategory.UNAUTHORIZED: {
        "title": "Access Denied",
        "message": "You are not allowed to modify this resource.",
        "action": "Only the owner of the link can change it.",
    },
    ErrorCategory.STORAGE_PROVIDER_ERROR: {
        "title": "Storage Provider Error",
        "message": "The storage provider rejected the request.",
        "action": "Reconnect your storage account and try again.",
    },
    ErrorCategory.MAIL_DELIVERY_FAILED: {
        "title": "Email Not Sent",
        "message": "We could not send the email right now.",
        "action": "Please try again in a few minutes.",
    },
    ErrorCategory.CONFIGURATION_ERROR: {
        "title": "Service Misconfigured",
        "message": "The service is not configured correctly.",
        "action": "Please contact support.",
    },
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# HTTP status used by the API layer for each category
HTTP_STATUS_CODES: Dict[ErrorCategory, int] = {
    ErrorCategory.USER_NOT_FOUND: 404,
    ErrorCategory.LINK_NOT_FOUND: 404,
    ErrorCategory.STORAGE_CREDENTIAL_NOT_FOUND: 404,
    ErrorCategory.INVALID_PROVIDER: 404,
    ErrorCategory.DUPLICATED_EMAIL: 409,
    ErrorCategory.DUPLICATED_SLUG: 409,
    ErrorCategory.INVALID_PASSWORD: 401,
    ErrorCategory.TOKEN_EXPIRED: 410,
    ErrorCategory.LINK_EXPIRED: 410,
    ErrorCategory.UNAUTHENTICATED: 401,
    ErrorCategory.UNAUTHORIZED: 403,
    ErrorCategory.STORAGE_PROVIDER_ERROR: 502,
    ErrorCategory.MAIL_DELIVERY_FAILED: 502,
    ErrorCategory.CONFIGURATION_ERROR: 500,
    ErrorCategory.INVALID_REQUEST: 400,
    ErrorCategory.SYSTEM_ERROR: 500,
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    category: ErrorCategory = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class NotFoundError(DomainError):
    """Base class for lookup misses on a primary fetch."""
    pass


class UserNotFoundError(NotFoundError):
    """Raised when a user cannot be found (or a recovery token does not match)."""

    category = ErrorCategory.USER_NOT_FOUND


class LinkNotFoundError(NotFoundError):
    """Raised when a link cannot be found by ID or slug."""

    category = ErrorCategory.LINK_NOT_FOUND


class StorageCredentialNotFoundError(NotFoundError):
    """Raised when a user has no credential for the requested storage provider."""

    category = ErrorCategory.STORAGE_CREDENTIAL_NOT_FOUND


class InvalidProviderError(NotFoundError):
    """Raised when a storage provider ID is not registered in the pool."""

    category = ErrorCategory.INVALID_PROVIDER


class DuplicateError(DomainError):
    """Base class for unique-key collisions."""
    pass


class DuplicatedEmailError(DuplicateError):
    """Raised when registering an email that already has an account."""

    category = ErrorCategory.DUPLICATED_EMAIL


class DuplicatedSlugError(DuplicateError):
    """Raised when a slug is already used by another link."""

    category = ErrorCategory.DUPLICATED_SLUG


class InvalidPasswordError(DomainError):
    """Raised when a password does not match the stored hash."""

    category = ErrorCategory.INVALID_PASSWORD


class TokenExpiredError(DomainError):
    """Raised when a password recovery token is past its expiry."""

    category = ErrorCategory.TOKEN_EXPIRED


class LinkExpiredError(DomainError):
    """Raised when uploading to a link whose deadline has passed."""

    category = ErrorCategory.LINK_EXPIRED


class UnauthenticatedError(DomainError):
    """Raised when an operation needs an identity and none was given."""

    category = ErrorCategory.UNAUTHENTICATED


class UnauthorizedError(DomainError):
    """Raised when the acting user does not own the target resource."""

    category = ErrorCategory.UNAUTHORIZED


class InvalidRequestError(DomainError):
    """Raised when request data is missing or malformed."""

    category = ErrorCategory.INVALID_REQUEST


class ExternalServiceError(DomainError):
    """
    Base exception for failures of external collaborators.

    These are propagated to the caller unchanged; nothing in the core retries.
    """
    pass


class StorageProviderError(ExternalServiceError):
    """Raised by storage provider adapters when the provider call fails."""

    category = ErrorCategory.STORAGE_PROVIDER_ERROR


class MailDeliveryError(ExternalServiceError):
    """Raised by mailers when a message cannot be delivered."""

    category = ErrorCategory.MAIL_DELIVERY_FAILED


class PasswordHashingError(ExternalServiceError):
    """Raised when a secret cannot be hashed."""

    category = ErrorCategory.INVALID_REQUEST


class PersistenceError(ExternalServiceError):
    """Raised by repositories when a write cannot be completed."""

    category = ErrorCategory.SYSTEM_ERROR


class TemplateNotFoundError(DomainError):
    """
    Raised when a mail template is missing.

    This is a deployment problem rather than a user error and is never retried.
    """

    category = ErrorCategory.CONFIGURATION_ERROR


# ============================================================================
# Application Layer Exceptions (Can have infrastructure concerns)
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    This is an application-layer concern that bridges domain errors
    with user-facing error messages and HTTP responses.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details for logging
            context: Additional context information
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        # Get user-friendly message
        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]
        self.http_status_code = HTTP_STATUS_CODES.get(category, 500)

        super().__init__(self.message)

    @classmethod
    def from_domain_error(cls, error: DomainError) -> "ApplicationError":
        """Wrap a domain error, keeping its message as technical detail."""
        return cls(error.category, str(error))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Returns:
            Dictionary with error information
        """
        return {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: Optional[int] = None,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Args:
        category: Error category
        technical_message: Technical error details for logging
        context: Additional context information
        status_code: HTTP status code, defaults to the category's status

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code or error.http_status_code
