"""
Request Authentication

Resolves the acting user from the bearer token on the current request.
"""

from typing import Optional

from flask import current_app, request

from domain.user_management import IAuthenticator, User


def resolve_identity() -> Optional[User]:
    """
    Resolve the user behind the request's Authorization header.

    Returns:
        The user, or None if the header is missing, malformed or the token
        does not resolve
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None

    authenticator = current_app.container.resolve(IAuthenticator)
    return authenticator.resolve_user(token)
