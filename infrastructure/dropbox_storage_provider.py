"""
Dropbox Storage Provider

Implements IStorageProvider against the Dropbox HTTP API with httpx.
"""

import json
import logging
from typing import BinaryIO, Optional

import httpx

from domain.errors import StorageProviderError
from domain.storage_provider import (
    IStorageProvider,
    StorageAccountInfo,
    StorageProviderCredential,
)

logger = logging.getLogger(__name__)

DROPBOX_PROVIDER_ID = 12345678
REQUIRED_SCOPE = "files.content.write"

NOT_ENOUGH_SCOPE_MESSAGE = (
    "Not enough scope given from the Dropbox access token. Please grant the "
    f"required scope '{REQUIRED_SCOPE}' and reset the access token."
)


class DropboxStorageProvider(IStorageProvider):
    """
    Dropbox implementation of IStorageProvider.

    Files land in /<remote_directory>/<slug>/<file_name>; name clashes are
    auto-renamed by Dropbox.
    """

    ACCOUNT_URL = "https://api.dropboxapi.com/2/users/get_current_account"
    UPLOAD_URL = "https://content.dropboxapi.com/2/files/upload"

    def __init__(
        self,
        remote_directory: str,
        http_client: Optional[httpx.Client] = None,
        account_timeout: float = 5.0,
        upload_timeout: float = 10.0,
    ):
        """
        Initialize DropboxStorageProvider.

        Args:
            remote_directory: Root folder for all drop links
            http_client: Preconfigured client, created if None
            account_timeout: Timeout in seconds for account info requests
            upload_timeout: Timeout in seconds for uploads
        """
        self.remote_directory = remote_directory
        self._http_client = http_client or httpx.Client()
        self.account_timeout = account_timeout
        self.upload_timeout = upload_timeout

    @property
    def provider_id(self) -> int:
        return DROPBOX_PROVIDER_ID

    def account_info(self, credential: StorageProviderCredential) -> StorageAccountInfo:
        try:
            resp = self._http_client.post(
                self.ACCOUNT_URL,
                headers={"Authorization": f"Bearer {credential.user_access_token}"},
                timeout=self.account_timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Dropbox account request failed: {str(e)}")
            raise StorageProviderError("Dropbox account request failed", e)

        if resp.status_code != 200:
            logger.warning(f"Dropbox account info rejected: {resp.status_code}")
            raise StorageProviderError(self._map_error(resp.status_code, resp.text))

        try:
            body = resp.json()
        except ValueError as e:
            raise StorageProviderError("Invalid Dropbox account response", e)

        email = body.get("email")
        photo = body.get("profile_photo_url")
        return StorageAccountInfo(
            email=email if isinstance(email, str) else "",
            photo=photo if isinstance(photo, str) else "",
        )

    def upload(
        self,
        credential: StorageProviderCredential,
        file_stream: BinaryIO,
        file_name: str,
        slug: str,
    ) -> None:
        api_arg = {
            "path": f"/{self.remote_directory}/{slug}/{file_name}",
            "mode": "add",
            "autorename": True,
            "mute": False,
        }
        headers = {
            "Authorization": f"Bearer {credential.user_access_token}",
            "Content-Type": "application/octet-stream",
            "Dropbox-API-Arg": json.dumps(api_arg),
        }

        try:
            resp = self._http_client.post(
                self.UPLOAD_URL,
                content=file_stream.read(),
                headers=headers,
                timeout=self.upload_timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Dropbox upload request failed: {str(e)}")
            raise StorageProviderError("Dropbox upload request failed", e)

        if resp.status_code != 200:
            logger.warning(f"Dropbox upload rejected: {resp.status_code}")
            raise StorageProviderError(self._map_error(resp.status_code, resp.text))

    @staticmethod
    def _map_error(status_code: int, body: str) -> str:
        """Translate a Dropbox error response into a message."""
        if status_code == 400 and REQUIRED_SCOPE in body:
            return NOT_ENOUGH_SCOPE_MESSAGE

        if status_code == 401:
            try:
                error = json.loads(body).get("error") or {}
            except (ValueError, AttributeError):
                error = {}
            if (
                isinstance(error, dict)
                and error.get(".tag") == "missing_scope"
                and error.get("required_scope") == REQUIRED_SCOPE
            ):
                return NOT_ENOUGH_SCOPE_MESSAGE

        return "Unknown dropbox error.\n" + body

    def close(self) -> None:
        self._http_client.close()
