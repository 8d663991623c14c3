"""
JWT Authenticator

Issues signed login tokens with PyJWT and resolves them back to users.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from domain.user_management import IAuthenticator, User, UserCredentials, UserRepository

logger = logging.getLogger(__name__)


class JWTAuthenticator(IAuthenticator):
    """
    HMAC-signed JWT implementation of IAuthenticator.

    Tokens carry the user ID and an expiry claim. Resolution loads the user
    from the repository so deleted accounts stop authenticating.
    """

    def __init__(
        self,
        secret: str,
        user_repository: UserRepository,
        algorithm: str = "HS256",
        duration: timedelta = timedelta(hours=24),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize JWTAuthenticator.

        Args:
            secret: Signing secret
            user_repository: Used to load the user a token belongs to
            algorithm: JWT signing algorithm
            duration: Token lifetime
            clock: Returns the current time, timezone-aware
        """
        self.secret = secret
        self.user_repository = user_repository
        self.algorithm = algorithm
        self.duration = duration
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def authenticate(self, user: User) -> UserCredentials:
        expiry = self.clock() + self.duration
        payload = {"user_id": user.id, "exp": expiry}
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return UserCredentials(token=token, expiry=expiry)

    def resolve_user(self, token: str) -> Optional[User]:
        """
        Resolve a bearer token to its user.

        Returns:
            The user, or None if the token is invalid, expired or orphaned
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired token")
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected invalid token: {str(e)}")
            return None

        user_id = payload.get("user_id")
        if not isinstance(user_id, int):
            return None

        user = self.user_repository.get(user_id)
        if user is None:
            logger.debug(f"Token refers to unknown user {user_id}")
        return user
