"""
Upload Application Service

Relays files dropped by anonymous visitors to the link owner's
storage account.
"""

import logging
from datetime import datetime
from typing import BinaryIO, Callable, Optional

from domain.errors import (
    InvalidPasswordError,
    LinkExpiredError,
    StorageCredentialNotFoundError,
)
from domain.storage_provider import StorageProviderPool

from .account_service import utc_now
from .link_service import LinkService

logger = logging.getLogger(__name__)


class UploadService:
    """
    Application service for the public upload flow.

    Workflow:
    1. Fetch the link
    2. Check the password if the link is protected
    3. Refuse uploads after the deadline
    4. Resolve the bound credential and its provider
    5. Hand the stream to the provider
    """

    def __init__(
        self,
        link_service: LinkService,
        provider_pool: StorageProviderPool,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.link_service = link_service
        self.provider_pool = provider_pool
        self.clock = clock

    def upload(
        self,
        link_id: int,
        password: Optional[str],
        file_stream: BinaryIO,
        file_name: str,
    ) -> None:
        """
        Upload a file through a drop link.

        Args:
            link_id: Target link
            password: Password supplied by the visitor, ignored for open links
            file_stream: Readable binary stream
            file_name: Original file name

        Raises:
            LinkNotFoundError: If the link doesn't exist
            InvalidPasswordError: If the link is protected and the password is wrong
            LinkExpiredError: If the deadline has passed
            StorageCredentialNotFoundError: If no storage account is bound
            InvalidProviderError: If the bound provider is no longer registered
            StorageProviderError: If the provider rejects the upload
        """
        link = self.link_service.fetch_link(link_id)

        if link.is_protected() and not self.link_service.check_link_password(
            link, password or ""
        ):
            logger.warning(f"Upload to link {link_id} rejected: invalid password")
            raise InvalidPasswordError(f"Invalid password for link {link_id}")

        if link.is_expired(self.clock()):
            logger.warning(f"Upload to link {link_id} rejected: link expired")
            raise LinkExpiredError(f"Link {link_id} expired at {link.deadline}")

        credential = link.user_storage_credential
        if credential is None:
            logger.warning(f"Upload to link {link_id} rejected: no storage connected")
            raise StorageCredentialNotFoundError(
                f"Link {link_id} is not bound to a storage account"
            )

        provider = self.provider_pool.get(credential.provider_id)

        logger.info(
            f"Uploading '{file_name}' to link {link_id} via provider {credential.provider_id}"
        )
        try:
            provider.upload(
                credential.as_provider_credential(), file_stream, file_name, link.slug
            )
        except Exception as e:
            logger.error(f"Upload to link {link_id} failed: {str(e)}")
            raise

        logger.info(f"Uploaded '{file_name}' to link {link_id}")
