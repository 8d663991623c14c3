"""
Unit tests for LinkService.

Tests creation, three-state updates, deletion, lookups and password
checks against in-memory repositories.
"""

from datetime import timedelta

import pytest

from domain.errors import (
    DuplicatedSlugError,
    InvalidProviderError,
    LinkNotFoundError,
    StorageCredentialNotFoundError,
)
from domain.link_management import FieldUpdate
from domain.storage_provider import UserStorageCredential, StorageAccountInfo
from tests.fixtures import FIXED_NOW, FakeStorageProvider, create_user


@pytest.fixture
def owner():
    return create_user(user_id=1)


@pytest.fixture
def other_user():
    return create_user(user_id=2, email="other@example.com")


@pytest.fixture
def credential(credential_repository, owner):
    return credential_repository.create(
        UserStorageCredential.create(
            owner.id, 12345678, "owner-token", StorageAccountInfo(email="dbx@example.com")
        )
    )


class TestCreateLink:
    """Test link creation."""

    def test_create_open_link(self, link_service, owner):
        link = link_service.create_link(owner, "Assignment", "abc", "Reports")

        assert link.id is not None
        assert link.user_id == owner.id
        assert link.description == "Reports"
        assert not link.is_protected()
        assert link.user_storage_credential is None

    def test_create_hashes_password(self, link_service, owner):
        link = link_service.create_link(owner, "Assignment", "abc", password="pw")

        assert link.password == "hashed:pw"
        assert link.is_protected()

    def test_create_with_empty_password_is_open(self, link_service, owner):
        link = link_service.create_link(owner, "Assignment", "abc", password="")

        assert not link.is_protected()

    def test_create_keeps_deadline(self, link_service, owner):
        deadline = FIXED_NOW + timedelta(days=1)

        link = link_service.create_link(owner, "Assignment", "abc", deadline=deadline)

        assert link_service.fetch_link(link.id).deadline == deadline

    def test_create_binds_provider(self, link_service, owner, credential):
        link = link_service.create_link(owner, "Assignment", "abc", provider_id=12345678)

        assert link.user_storage_credential_id == credential.id
        assert link.user_storage_credential.email == "dbx@example.com"

    @pytest.mark.parametrize("provider_id", [0, -3])
    def test_create_ignores_non_positive_provider(self, link_service, owner, provider_id):
        link = link_service.create_link(owner, "Assignment", "abc", provider_id=provider_id)

        assert link.user_storage_credential_id is None

    def test_create_with_unknown_provider(self, link_service, owner, link_repository):
        with pytest.raises(InvalidProviderError):
            link_service.create_link(owner, "Assignment", "abc", provider_id=777)

        assert link_repository.get_by_slug("abc") is None

    def test_create_without_connected_storage(self, link_service, owner):
        with pytest.raises(StorageCredentialNotFoundError):
            link_service.create_link(owner, "Assignment", "abc", provider_id=12345678)

    def test_create_cannot_use_another_users_credential(
        self, link_service, other_user, credential
    ):
        with pytest.raises(StorageCredentialNotFoundError):
            link_service.create_link(other_user, "Mine", "mine", provider_id=12345678)

    def test_create_duplicate_slug(self, link_service, owner, other_user):
        link_service.create_link(owner, "First", "abc")

        with pytest.raises(DuplicatedSlugError):
            link_service.create_link(other_user, "Second", "abc")


class TestUpdateLink:
    """Test link updates."""

    def test_slug_uniqueness_scenario(
        self, link_service, owner, other_user, credential, provider_pool
    ):
        """
        Arrange: User A owns a link with slug "abc" bound to storage
        Act: User B claims "abc"; A re-saves "abc"; A rebinds to an unknown provider
        Assert: B fails, A succeeds, the failed rebind leaves the binding as it was
        """
        link = link_service.create_link(owner, "A", "abc", provider_id=12345678)

        with pytest.raises(DuplicatedSlugError):
            link_service.create_link(other_user, "B", "abc")

        updated = link_service.update_link(link.id, "A", "abc")
        assert updated.slug == "abc"

        with pytest.raises(InvalidProviderError):
            link_service.update_link(
                link.id, "A renamed", "abc", provider_id=FieldUpdate.set_to(999)
            )

        stored = link_service.fetch_link(link.id)
        assert stored.title == "A"
        assert stored.user_storage_credential_id == credential.id

    def test_update_to_taken_slug(self, link_service, owner):
        link_service.create_link(owner, "First", "first")
        second = link_service.create_link(owner, "Second", "second")

        with pytest.raises(DuplicatedSlugError):
            link_service.update_link(second.id, "Second", "first")

    def test_update_replaces_title_slug_and_deadline(self, link_service, owner):
        link = link_service.create_link(
            owner, "Old", "old", "Keep me", deadline=FIXED_NOW
        )

        updated = link_service.update_link(link.id, "New", "new")

        assert updated.title == "New"
        assert updated.slug == "new"
        assert updated.description == "Keep me"
        assert updated.deadline is None
        assert link_service.find_link_by_slug("new").id == link.id
        with pytest.raises(LinkNotFoundError):
            link_service.find_link_by_slug("old")

    def test_update_description_when_given(self, link_service, owner):
        link = link_service.create_link(owner, "T", "t", "before")

        assert link_service.update_link(link.id, "T", "t", description="").description == ""

    def test_password_unchanged_by_default(self, link_service, owner):
        link = link_service.create_link(owner, "T", "t", password="pw")

        updated = link_service.update_link(link.id, "T", "t")

        assert updated.password == "hashed:pw"

    def test_password_cleared(self, link_service, owner):
        link = link_service.create_link(owner, "T", "t", password="pw")

        updated = link_service.update_link(link.id, "T", "t", password=FieldUpdate.clear())

        assert not updated.is_protected()

    def test_password_replaced(self, link_service, owner):
        link = link_service.create_link(owner, "T", "t", password="pw")

        updated = link_service.update_link(
            link.id, "T", "t", password=FieldUpdate.set_to("new")
        )

        assert updated.password == "hashed:new"

    def test_provider_cleared(self, link_service, owner, credential):
        link = link_service.create_link(owner, "T", "t", provider_id=12345678)

        updated = link_service.update_link(
            link.id, "T", "t", provider_id=FieldUpdate.from_provider_id(0)
        )

        assert updated.user_storage_credential_id is None
        assert updated.user_storage_credential is None

    def test_provider_rebound(
        self, link_service, owner, credential, credential_repository, provider_pool
    ):
        provider_pool.register(FakeStorageProvider(provider_id=42))
        drive = credential_repository.create(
            UserStorageCredential.create(owner.id, 42, "drive-token", StorageAccountInfo())
        )
        link = link_service.create_link(owner, "T", "t", provider_id=12345678)

        updated = link_service.update_link(
            link.id, "T", "t", provider_id=FieldUpdate.set_to(42)
        )

        assert updated.user_storage_credential_id == drive.id

    def test_update_missing_link(self, link_service):
        with pytest.raises(LinkNotFoundError):
            link_service.update_link(99, "T", "t")


class TestLookupAndDelete:
    """Test fetch, slug lookup, listing and deletion."""

    def test_fetch_missing_link(self, link_service):
        with pytest.raises(LinkNotFoundError):
            link_service.fetch_link(1)

    def test_find_by_slug(self, link_service, owner):
        link = link_service.create_link(owner, "T", "slug-1")

        assert link_service.find_link_by_slug("slug-1").id == link.id

    def test_list_links_by_owner(self, link_service, owner, other_user):
        link_service.create_link(owner, "A", "a")
        link_service.create_link(other_user, "B", "b")
        link_service.create_link(owner, "C", "c")

        assert [link.slug for link in link_service.list_links(owner.id)] == ["a", "c"]
        assert link_service.list_links(99) == []

    def test_delete_frees_slug(self, link_service, owner, other_user):
        link = link_service.create_link(owner, "A", "abc")

        link_service.delete_link(link.id)

        with pytest.raises(LinkNotFoundError):
            link_service.fetch_link(link.id)
        assert link_service.create_link(other_user, "B", "abc").slug == "abc"

    def test_delete_missing_link(self, link_service):
        with pytest.raises(LinkNotFoundError):
            link_service.delete_link(5)


class TestBoundCredential:
    """Test that links always show the current state of their storage account."""

    @pytest.fixture
    def registered(self, account_service):
        return account_service.register("user@example.com", "User", "secret")

    def test_reconnect_shows_new_account(
        self, link_service, account_service, storage_provider, registered
    ):
        account_service.connect_storage_provider(registered.id, 12345678, "token-1")
        link = link_service.create_link(registered, "T", "abc", provider_id=12345678)

        storage_provider.account = StorageAccountInfo(email="new@example.com", photo="p2")
        account_service.connect_storage_provider(registered.id, 12345678, "token-2")

        for loaded in (
            link_service.fetch_link(link.id),
            link_service.find_link_by_slug("abc"),
            link_service.list_links(registered.id)[0],
        ):
            assert loaded.user_storage_credential.email == "new@example.com"
            assert loaded.user_storage_credential.provider_credential == "token-2"

    def test_disconnect_leaves_link_unbound(
        self, link_service, account_service, registered
    ):
        account_service.connect_storage_provider(registered.id, 12345678, "token-1")
        link = link_service.create_link(registered, "T", "abc", provider_id=12345678)

        account_service.disconnect_storage_provider(registered.id, 12345678)

        assert link_service.fetch_link(link.id).user_storage_credential is None
        assert link_service.find_link_by_slug("abc").user_storage_credential is None

    def test_stored_link_keeps_only_the_reference(
        self, link_service, link_repository, owner, credential
    ):
        link = link_service.create_link(owner, "T", "abc", provider_id=12345678)

        stored = link_repository.get(link.id)

        assert stored.user_storage_credential_id == credential.id
        assert stored.user_storage_credential is None
        assert "owner-token" not in str(stored.to_dict())


class TestCheckPassword:
    """Test link password checks."""

    def test_open_link_accepts_anything(self, link_service, owner):
        link = link_service.create_link(owner, "T", "t")

        assert link_service.check_link_password(link, "")
        assert link_service.check_link_password(link, "whatever")

    def test_protected_link(self, link_service, owner):
        link = link_service.create_link(owner, "T", "t", password="pw")

        assert link_service.check_link_password(link, "pw")
        assert not link_service.check_link_password(link, "nope")
        assert not link_service.check_link_password(link, "")
