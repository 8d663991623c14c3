"""
Authorization Layer

Per-request ownership checks applied by the transport boundary before
it calls a mutating link operation.
"""

import logging
from typing import Optional

from domain.errors import UnauthenticatedError, UnauthorizedError
from domain.link_management import Link
from domain.user_management import User

from .link_service import LinkService

logger = logging.getLogger(__name__)


class LinkAuthorizer:
    """
    Stateless guard for link mutations.

    The acting identity is resolved by the caller and passed in explicitly.
    Slug lookup, password checks and uploads are public and never go
    through this guard.
    """

    def __init__(self, link_service: LinkService):
        self.link_service = link_service

    def require_identity(self, identity: Optional[User]) -> User:
        """
        Raises:
            UnauthenticatedError: If no identity was resolved
        """
        if identity is None:
            raise UnauthenticatedError("Authentication required")
        return identity

    def require_link_owner(self, identity: Optional[User], link_id: int) -> Link:
        """
        Fetch a link and check the acting user owns it.

        Returns:
            The link, for callers that need it

        Raises:
            UnauthenticatedError: If no identity was resolved
            LinkNotFoundError: If the link doesn't exist
            UnauthorizedError: If the link belongs to another user
        """
        user = self.require_identity(identity)
        link = self.link_service.fetch_link(link_id)

        if link.user_id != user.id:
            logger.warning(f"User {user.id} denied access to link {link_id}")
            raise UnauthorizedError(f"User {user.id} does not own link {link_id}")

        return link
