"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields

from api.v1 import api

# =============================================================================
# Request Models
# =============================================================================

register_request = api.model(
    "RegisterRequest",
    {
        "email": fields.String(required=True, example="user@example.com"),
        "name": fields.String(required=True, example="Jane Doe"),
        "password": fields.String(required=True, min_length=1),
    },
)

login_request = api.model(
    "LoginRequest",
    {
        "email": fields.String(required=True, example="user@example.com"),
        "password": fields.String(required=True),
    },
)

password_recovery_request = api.model(
    "PasswordRecoveryRequest",
    {
        "email": fields.String(required=True, example="user@example.com"),
    },
)

recover_password_request = api.model(
    "RecoverPasswordRequest",
    {
        "email": fields.String(required=True, example="user@example.com"),
        "token": fields.String(required=True, description="Token from the recovery mail"),
        "new_password": fields.String(required=True, min_length=1),
    },
)

update_profile_request = api.model(
    "UpdateProfileRequest",
    {
        "name": fields.String(description="New display name"),
        "new_password": fields.String(description="New password"),
        "old_password": fields.String(
            description="Current password, required when changing the password"
        ),
    },
)

storage_token_request = api.model(
    "StorageTokenRequest",
    {
        "dropbox_token": fields.String(
            required=True, description="Dropbox access token, null to remove", allow_null=True
        ),
    },
)

connect_storage_request = api.model(
    "ConnectStorageRequest",
    {
        "provider_id": fields.Integer(required=True, example=12345678),
        "provider_credential": fields.String(
            required=True, description="Access token issued by the provider"
        ),
    },
)

create_link_request = api.model(
    "CreateLinkRequest",
    {
        "title": fields.String(required=True, example="Assignment 1"),
        "slug": fields.String(required=True, example="assignment-1"),
        "description": fields.String(example="Upload your reports here"),
        "deadline": fields.DateTime(
            description="ISO 8601 moment after which uploads are refused", allow_null=True
        ),
        "password": fields.String(description="Empty or absent leaves the link open"),
        "provider_id": fields.Integer(
            description="Storage provider to relay uploads to", example=12345678
        ),
    },
)

update_link_request = api.model(
    "UpdateLinkRequest",
    {
        "title": fields.String(required=True),
        "slug": fields.String(required=True),
        "description": fields.String(description="Absent keeps the current description"),
        "deadline": fields.DateTime(
            description="Absent or null removes the deadline", allow_null=True
        ),
        "password": fields.String(
            description="Absent keeps it, empty string removes it, otherwise replaces it"
        ),
        "provider_id": fields.Integer(
            description="Absent keeps it, 0 unbinds storage, otherwise rebinds it"
        ),
    },
)

check_password_request = api.model(
    "CheckPasswordRequest",
    {
        "password": fields.String(required=True),
    },
)

# =============================================================================
# Response Models
# =============================================================================

credentials_response = api.model(
    "CredentialsResponse",
    {
        "token": fields.String(description="Bearer token"),
        "expiry": fields.DateTime(description="Token expiry", allow_null=True),
    },
)

user_response = api.model(
    "UserResponse",
    {
        "id": fields.Integer(),
        "email": fields.String(),
        "name": fields.String(),
        "dropbox_connected": fields.Boolean(
            description="Whether a legacy Dropbox token is stored"
        ),
    },
)

storage_credential_response = api.model(
    "StorageCredentialResponse",
    {
        "id": fields.Integer(),
        "provider_id": fields.Integer(),
        "email": fields.String(description="Storage account email"),
        "photo": fields.String(description="Storage account photo URL"),
    },
)

link_response = api.model(
    "LinkResponse",
    {
        "id": fields.Integer(),
        "user_id": fields.Integer(description="Owner"),
        "title": fields.String(),
        "slug": fields.String(),
        "description": fields.String(),
        "is_protected": fields.Boolean(),
        "deadline": fields.DateTime(allow_null=True),
        "storage_provider": fields.Nested(
            storage_credential_response, allow_null=True
        ),
    },
)

check_password_response = api.model(
    "CheckPasswordResponse",
    {
        "valid": fields.Boolean(),
    },
)

message_response = api.model(
    "MessageResponse",
    {
        "message": fields.String(),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Short error title"),
        "message": fields.String(description="User-facing error message"),
        "action": fields.String(description="Suggested next step"),
    },
)
