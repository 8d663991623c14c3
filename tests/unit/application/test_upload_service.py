"""
Unit tests for UploadService.

Covers the check order of the public upload flow: link, password,
deadline, storage binding, provider.
"""

import io
from datetime import timedelta

import pytest

from domain.errors import (
    InvalidPasswordError,
    InvalidProviderError,
    LinkExpiredError,
    LinkNotFoundError,
    StorageCredentialNotFoundError,
    StorageProviderError,
)
from domain.storage_provider import (
    StorageAccountInfo,
    StorageProviderPool,
    UserStorageCredential,
)
from tests.fixtures import FIXED_NOW, create_user


@pytest.fixture
def owner():
    return create_user(user_id=1)


@pytest.fixture
def credential(credential_repository, owner):
    return credential_repository.create(
        UserStorageCredential.create(owner.id, 12345678, "owner-token", StorageAccountInfo())
    )


@pytest.fixture
def bound_link(link_service, owner, credential):
    return link_service.create_link(owner, "Reports", "reports", provider_id=12345678)


class TestUpload:
    """Test the upload flow."""

    def test_upload_to_open_link(self, upload_service, bound_link, storage_provider):
        """
        Arrange: Open link bound to a storage account
        Act: Upload without a password
        Assert: Provider receives the owner's token, content, name and slug
        """
        upload_service.upload(bound_link.id, None, io.BytesIO(b"report"), "report.pdf")

        assert storage_provider.uploads == [
            {
                "token": "owner-token",
                "content": b"report",
                "file_name": "report.pdf",
                "slug": "reports",
            }
        ]

    def test_upload_uses_refreshed_token(
        self, upload_service, bound_link, credential, credential_repository, storage_provider
    ):
        credential.refresh("rotated-token", StorageAccountInfo())
        credential_repository.update(credential)

        upload_service.upload(bound_link.id, None, io.BytesIO(b"x"), "x.txt")

        assert storage_provider.uploads[0]["token"] == "rotated-token"

    def test_upload_missing_link(self, upload_service):
        with pytest.raises(LinkNotFoundError):
            upload_service.upload(9, None, io.BytesIO(b"x"), "x.txt")

    def test_upload_protected_link(self, upload_service, link_service, owner, credential,
                                   storage_provider):
        link = link_service.create_link(
            owner, "Secret", "secret", password="pw", provider_id=12345678
        )

        with pytest.raises(InvalidPasswordError):
            upload_service.upload(link.id, None, io.BytesIO(b"x"), "x.txt")
        with pytest.raises(InvalidPasswordError):
            upload_service.upload(link.id, "wrong", io.BytesIO(b"x"), "x.txt")

        upload_service.upload(link.id, "pw", io.BytesIO(b"x"), "x.txt")
        assert len(storage_provider.uploads) == 1

    def test_password_checked_before_deadline(
        self, upload_service, link_service, owner, credential, clock
    ):
        link = link_service.create_link(
            owner, "T", "t", password="pw", deadline=FIXED_NOW, provider_id=12345678
        )
        clock.now = FIXED_NOW + timedelta(hours=1)

        with pytest.raises(InvalidPasswordError):
            upload_service.upload(link.id, "wrong", io.BytesIO(b"x"), "x.txt")

    def test_upload_after_deadline(
        self, upload_service, link_service, owner, credential, clock, storage_provider
    ):
        link = link_service.create_link(
            owner, "T", "t", deadline=FIXED_NOW, provider_id=12345678
        )

        upload_service.upload(link.id, None, io.BytesIO(b"x"), "on-time.txt")
        clock.now = FIXED_NOW + timedelta(seconds=1)

        with pytest.raises(LinkExpiredError):
            upload_service.upload(link.id, None, io.BytesIO(b"x"), "late.txt")
        assert [u["file_name"] for u in storage_provider.uploads] == ["on-time.txt"]

    def test_upload_unbound_link(self, upload_service, link_service, owner):
        link = link_service.create_link(owner, "T", "t")

        with pytest.raises(StorageCredentialNotFoundError):
            upload_service.upload(link.id, None, io.BytesIO(b"x"), "x.txt")

    def test_upload_after_disconnect(
        self, upload_service, bound_link, credential, credential_repository
    ):
        credential_repository.delete(credential)

        with pytest.raises(StorageCredentialNotFoundError):
            upload_service.upload(bound_link.id, None, io.BytesIO(b"x"), "x.txt")

    def test_upload_to_unregistered_provider(self, upload_service, bound_link):
        upload_service.provider_pool = StorageProviderPool()

        with pytest.raises(InvalidProviderError):
            upload_service.upload(bound_link.id, None, io.BytesIO(b"x"), "x.txt")

    def test_provider_error_propagates(self, upload_service, bound_link, storage_provider):
        storage_provider.error = StorageProviderError("Unknown dropbox error.\n")

        with pytest.raises(StorageProviderError):
            upload_service.upload(bound_link.id, None, io.BytesIO(b"x"), "x.txt")
