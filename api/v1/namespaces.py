"""
API Namespaces - Organized endpoint groups
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import current_app, request
from flask_restx import Namespace, Resource

from api.authentication import resolve_identity
from api.error_handling import handle_domain_errors
from api.v1.models import (
    check_password_request,
    check_password_response,
    connect_storage_request,
    create_link_request,
    credentials_response,
    error_response,
    link_response,
    login_request,
    message_response,
    password_recovery_request,
    recover_password_request,
    register_request,
    storage_credential_response,
    storage_token_request,
    update_link_request,
    update_profile_request,
    user_response,
)
from application.account_service import AccountService
from application.authorization import LinkAuthorizer
from application.link_service import LinkService
from application.upload_service import UploadService
from domain.errors import InvalidRequestError
from domain.link_management import FieldUpdate, Link
from domain.storage_provider import UserStorageCredential
from domain.user_management import User

# =============================================================================
# Helpers
# =============================================================================


def _account_service() -> AccountService:
    return current_app.container.resolve(AccountService)


def _link_service() -> LinkService:
    return current_app.container.resolve(LinkService)


def _authorizer() -> LinkAuthorizer:
    return current_app.container.resolve(LinkAuthorizer)


def _upload_service() -> UploadService:
    return current_app.container.resolve(UploadService)


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    return data


def _required_string(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(f"Missing '{key}' in request body")
    return value.strip()


def _optional_string(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidRequestError(f"'{key}' must be a string")
    return value


def _optional_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"'{key}' must be an integer")
    return value


def _parse_deadline(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 deadline. Naive values are taken as UTC."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidRequestError("'deadline' must be an ISO 8601 string")
    try:
        deadline = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidRequestError(f"Invalid deadline: {value}")
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=timezone.utc)
    return deadline


def _user_to_response(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "dropbox_connected": bool(user.dropbox_token),
    }


def _credential_to_response(credential: UserStorageCredential) -> Dict[str, Any]:
    # the access token never leaves the server
    return {
        "id": credential.id,
        "provider_id": credential.provider_id,
        "email": credential.email,
        "photo": credential.photo,
    }


def _link_to_response(link: Link) -> Dict[str, Any]:
    return {
        "id": link.id,
        "user_id": link.user_id,
        "title": link.title,
        "slug": link.slug,
        "description": link.description,
        "is_protected": link.is_protected(),
        "deadline": link.deadline.isoformat() if link.deadline else None,
        "storage_provider": (
            _credential_to_response(link.user_storage_credential)
            if link.user_storage_credential
            else None
        ),
    }


# =============================================================================
# Auth Namespace - Registration, login and password recovery
# =============================================================================

auth_ns = Namespace("auth", description="Registration, login and password recovery")


@auth_ns.route("/register")
class Register(Resource):
    """Account registration"""

    @auth_ns.doc("register")
    @auth_ns.expect(register_request, validate=True)
    @auth_ns.response(201, "Registered", credentials_response)
    @auth_ns.response(409, "Email Already Registered", error_response)
    @handle_domain_errors
    def post(self):
        """
        Register a new account

        Returns a bearer token for the new account.
        """
        data = _json_body()
        email = _required_string(data, "email")
        password = data.get("password") or ""
        if not password:
            raise InvalidRequestError("Missing 'password' in request body")

        account_service = _account_service()
        account_service.register(email, _required_string(data, "name"), password)
        credentials = account_service.authenticate(email, password)
        return credentials.to_dict(), 201


@auth_ns.route("/login")
class Login(Resource):
    """Login"""

    @auth_ns.doc("login")
    @auth_ns.expect(login_request, validate=True)
    @auth_ns.response(200, "Success", credentials_response)
    @auth_ns.response(401, "Invalid Password", error_response)
    @auth_ns.response(404, "User Not Found", error_response)
    @handle_domain_errors
    def post(self):
        """Exchange email and password for a bearer token"""
        data = _json_body()
        credentials = _account_service().authenticate(
            _required_string(data, "email"), data.get("password") or ""
        )
        return credentials.to_dict(), 200


@auth_ns.route("/password-recovery")
class PasswordRecovery(Resource):
    """Password recovery request"""

    @auth_ns.doc("request_password_recovery")
    @auth_ns.expect(password_recovery_request, validate=True)
    @auth_ns.response(202, "Recovery Mail Sent", message_response)
    @auth_ns.response(404, "User Not Found", error_response)
    @handle_domain_errors
    def post(self):
        """
        Send a password recovery mail

        The mail contains a short-lived token. Requesting again replaces it.
        """
        data = _json_body()
        _account_service().request_password_recovery(_required_string(data, "email"))
        return {"message": "Password recovery mail sent"}, 202


@auth_ns.route("/password-recovery/confirm")
class PasswordRecoveryConfirm(Resource):
    """Password reset with a recovery token"""

    @auth_ns.doc("recover_password")
    @auth_ns.expect(recover_password_request, validate=True)
    @auth_ns.response(200, "Password Reset", message_response)
    @auth_ns.response(404, "Token Not Found", error_response)
    @auth_ns.response(410, "Token Expired", error_response)
    @handle_domain_errors
    def post(self):
        """Set a new password using the token from the recovery mail"""
        data = _json_body()
        new_password = data.get("new_password") or ""
        if not new_password:
            raise InvalidRequestError("Missing 'new_password' in request body")

        _account_service().recover_password(
            _required_string(data, "email"), data.get("token") or "", new_password
        )
        return {"message": "Password has been reset"}, 200


# =============================================================================
# Account Namespace - The authenticated user's profile
# =============================================================================

account_ns = Namespace("account", description="Profile of the authenticated user")


@account_ns.route("/me")
class Me(Resource):
    """Current user"""

    @account_ns.doc("get_me", security="Bearer")
    @account_ns.response(200, "Success", user_response)
    @account_ns.response(401, "Authentication Required", error_response)
    @handle_domain_errors
    def get(self):
        """Get the authenticated user"""
        user = _authorizer().require_identity(resolve_identity())
        return _user_to_response(user), 200

    @account_ns.doc("update_me", security="Bearer")
    @account_ns.expect(update_profile_request)
    @account_ns.response(200, "Updated", user_response)
    @account_ns.response(401, "Authentication Required or Invalid Password", error_response)
    @handle_domain_errors
    def put(self):
        """
        Update name and/or password

        Changing the password requires old_password.
        """
        user = _authorizer().require_identity(resolve_identity())
        data = _json_body()
        updated = _account_service().update_profile(
            user.id,
            name=_optional_string(data, "name"),
            new_password=_optional_string(data, "new_password"),
            old_password=_optional_string(data, "old_password"),
        )
        return _user_to_response(updated), 200


@account_ns.route("/me/storage-token")
class StorageToken(Resource):
    """Legacy single Dropbox token"""

    @account_ns.doc("update_storage_token", security="Bearer")
    @account_ns.expect(storage_token_request)
    @account_ns.response(200, "Updated", user_response)
    @account_ns.response(401, "Authentication Required", error_response)
    @handle_domain_errors
    def put(self):
        """Store or remove the legacy Dropbox token"""
        user = _authorizer().require_identity(resolve_identity())
        data = _json_body()
        updated = _account_service().update_storage_token(
            user.id, _optional_string(data, "dropbox_token")
        )
        return _user_to_response(updated), 200


# =============================================================================
# Storage Provider Namespace - Connected storage accounts
# =============================================================================

storage_provider_ns = Namespace(
    "storage-providers", description="Storage accounts connected to the authenticated user"
)


@storage_provider_ns.route("/")
class StorageProviderList(Resource):
    """Connected storage accounts"""

    @storage_provider_ns.doc("list_storage_providers", security="Bearer")
    @storage_provider_ns.response(200, "Success", [storage_credential_response])
    @storage_provider_ns.response(401, "Authentication Required", error_response)
    @handle_domain_errors
    def get(self):
        """List connected storage accounts"""
        user = _authorizer().require_identity(resolve_identity())
        credentials = _account_service().list_storage_providers(user.id)
        return [_credential_to_response(c) for c in credentials], 200

    @storage_provider_ns.doc("connect_storage_provider", security="Bearer")
    @storage_provider_ns.expect(connect_storage_request, validate=True)
    @storage_provider_ns.response(201, "Connected", storage_credential_response)
    @storage_provider_ns.response(404, "Invalid Provider", error_response)
    @storage_provider_ns.response(502, "Provider Rejected Token", error_response)
    @handle_domain_errors
    def post(self):
        """
        Connect a storage account

        Connecting a provider that is already connected replaces its token.
        """
        user = _authorizer().require_identity(resolve_identity())
        data = _json_body()
        provider_id = _optional_int(data, "provider_id")
        if provider_id is None:
            raise InvalidRequestError("Missing 'provider_id' in request body")

        credential = _account_service().connect_storage_provider(
            user.id, provider_id, _required_string(data, "provider_credential")
        )
        return _credential_to_response(credential), 201


@storage_provider_ns.route("/<int:provider_id>")
@storage_provider_ns.param("provider_id", "The storage provider identifier")
class StorageProvider(Resource):
    """Single connected storage account"""

    @storage_provider_ns.doc("disconnect_storage_provider", security="Bearer")
    @storage_provider_ns.response(204, "Disconnected")
    @storage_provider_ns.response(404, "Invalid Provider", error_response)
    @handle_domain_errors
    def delete(self, provider_id):
        """Disconnect a storage account. Disconnecting twice is not an error."""
        user = _authorizer().require_identity(resolve_identity())
        _account_service().disconnect_storage_provider(user.id, provider_id)
        return "", 204


# =============================================================================
# Link Namespace - Drop links
# =============================================================================

link_ns = Namespace("links", description="Drop link operations")


@link_ns.route("/")
class LinkList(Resource):
    """Links of the authenticated user"""

    @link_ns.doc("list_links", security="Bearer")
    @link_ns.response(200, "Success", [link_response])
    @link_ns.response(401, "Authentication Required", error_response)
    @handle_domain_errors
    def get(self):
        """List the authenticated user's links"""
        user = _authorizer().require_identity(resolve_identity())
        links = _link_service().list_links(user.id)
        return [_link_to_response(link) for link in links], 200

    @link_ns.doc("create_link", security="Bearer")
    @link_ns.expect(create_link_request)
    @link_ns.response(201, "Created", link_response)
    @link_ns.response(404, "Invalid Provider or Storage Not Connected", error_response)
    @link_ns.response(409, "Slug Already Taken", error_response)
    @handle_domain_errors
    def post(self):
        """Create a drop link"""
        user = _authorizer().require_identity(resolve_identity())
        data = _json_body()
        link = _link_service().create_link(
            user,
            title=_required_string(data, "title"),
            slug=_required_string(data, "slug"),
            description=_optional_string(data, "description") or "",
            deadline=_parse_deadline(data.get("deadline")),
            password=_optional_string(data, "password"),
            provider_id=_optional_int(data, "provider_id"),
        )
        return _link_to_response(link), 201


@link_ns.route("/<int:link_id>")
@link_ns.param("link_id", "The link identifier")
class LinkItem(Resource):
    """Single drop link"""

    @link_ns.doc("get_link")
    @link_ns.response(200, "Success", link_response)
    @link_ns.response(404, "Link Not Found", error_response)
    @handle_domain_errors
    def get(self, link_id):
        """Get a link by ID"""
        return _link_to_response(_link_service().fetch_link(link_id)), 200

    @link_ns.doc("update_link", security="Bearer")
    @link_ns.expect(update_link_request)
    @link_ns.response(200, "Updated", link_response)
    @link_ns.response(403, "Not The Owner", error_response)
    @link_ns.response(404, "Link Not Found", error_response)
    @link_ns.response(409, "Slug Already Taken", error_response)
    @handle_domain_errors
    def put(self, link_id):
        """
        Update a link

        Title, slug and deadline are replaced. Password and provider_id are
        only touched when present in the body.
        """
        _authorizer().require_link_owner(resolve_identity(), link_id)
        data = _json_body()
        link = _link_service().update_link(
            link_id,
            title=_required_string(data, "title"),
            slug=_required_string(data, "slug"),
            description=_optional_string(data, "description"),
            deadline=_parse_deadline(data.get("deadline")),
            password=FieldUpdate.from_password(
                _optional_string(data, "password"), "password" in data
            ),
            provider_id=FieldUpdate.from_provider_id(
                _optional_int(data, "provider_id"), "provider_id" in data
            ),
        )
        return _link_to_response(link), 200

    @link_ns.doc("delete_link", security="Bearer")
    @link_ns.response(204, "Deleted")
    @link_ns.response(403, "Not The Owner", error_response)
    @link_ns.response(404, "Link Not Found", error_response)
    @handle_domain_errors
    def delete(self, link_id):
        """Delete a link"""
        _authorizer().require_link_owner(resolve_identity(), link_id)
        _link_service().delete_link(link_id)
        return "", 204


@link_ns.route("/slug/<string:slug>")
@link_ns.param("slug", "The link slug")
class LinkBySlug(Resource):
    """Public link lookup"""

    @link_ns.doc("find_link_by_slug")
    @link_ns.response(200, "Success", link_response)
    @link_ns.response(404, "Link Not Found", error_response)
    @handle_domain_errors
    def get(self, slug):
        """Find a link by its slug"""
        return _link_to_response(_link_service().find_link_by_slug(slug)), 200


@link_ns.route("/<int:link_id>/check-password")
@link_ns.param("link_id", "The link identifier")
class LinkPassword(Resource):
    """Public password check"""

    @link_ns.doc("check_link_password")
    @link_ns.expect(check_password_request)
    @link_ns.response(200, "Success", check_password_response)
    @link_ns.response(404, "Link Not Found", error_response)
    @handle_domain_errors
    def post(self, link_id):
        """Check a password against a link. Open links accept anything."""
        data = _json_body()
        link_service = _link_service()
        link = link_service.fetch_link(link_id)
        valid = link_service.check_link_password(
            link, _optional_string(data, "password") or ""
        )
        return {"valid": valid}, 200


# =============================================================================
# Upload Namespace - Anonymous uploads through a link
# =============================================================================

upload_ns = Namespace("uploads", description="Anonymous uploads through drop links")


@upload_ns.route("/")
class Upload(Resource):
    """File upload"""

    @upload_ns.doc(
        "upload_file",
        params={
            "file": {"in": "formData", "type": "file", "required": True},
            "link_id": {"in": "formData", "type": "integer", "required": True},
            "password": {"in": "formData", "type": "string"},
        },
    )
    @upload_ns.response(200, "Uploaded", message_response)
    @upload_ns.response(401, "Invalid Password", error_response)
    @upload_ns.response(404, "Link Not Found", error_response)
    @upload_ns.response(410, "Link Expired", error_response)
    @upload_ns.response(502, "Storage Provider Error", error_response)
    @handle_domain_errors
    def post(self):
        """
        Upload a file through a drop link

        The file is relayed to the storage account bound to the link.
        """
        uploaded = request.files.get("file")
        if uploaded is None or not uploaded.filename:
            raise InvalidRequestError("Invalid file")

        try:
            link_id = int(request.form.get("link_id", ""))
        except ValueError:
            raise InvalidRequestError("Invalid link ID")

        _upload_service().upload(
            link_id,
            request.form.get("password"),
            uploaded.stream,
            os.path.basename(uploaded.filename),
        )
        return {"message": "File is successfully uploaded"}, 200
