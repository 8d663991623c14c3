"""
Redis Link Repository Implementation

Concrete Redis-based implementation of LinkRepository. Slugs are kept
unique through an index hash claimed with HSETNX, and each owner's links
are tracked in a set.
"""

import dataclasses
from typing import List, Optional

from domain.errors import DuplicatedSlugError, PersistenceError
from domain.link_management import Link, LinkRepository

from .redis_repository import RedisRepository


class RedisLinkRepository(LinkRepository):
    """Redis-based implementation of LinkRepository."""

    SLUG_INDEX = "link_slug"

    def __init__(self, redis_repository: RedisRepository):
        self.redis_repo = redis_repository
        self.key_prefix = "link"

    def _key(self, link_id: int) -> str:
        return f"{self.key_prefix}:{link_id}"

    def _owner_key(self, user_id: int) -> str:
        return f"user_links:{user_id}"

    def create(self, link: Link) -> Link:
        link_id = self.redis_repo.next_id(self.key_prefix)

        if not self.redis_repo.claim(self.SLUG_INDEX, link.slug, link_id):
            raise DuplicatedSlugError(f"Slug already taken: {link.slug}")

        stored = dataclasses.replace(link, id=link_id, user_storage_credential=None)
        try:
            self.redis_repo.set_json(self._key(link_id), stored.to_dict())
        except PersistenceError:
            self.redis_repo.release(self.SLUG_INDEX, link.slug)
            raise
        self.redis_repo.add_member(self._owner_key(link.user_id), link_id)
        return stored

    def get(self, link_id: int) -> Optional[Link]:
        data = self.redis_repo.get_json(self._key(link_id))
        if data is None:
            return None
        return Link.from_dict(data)

    def get_by_slug(self, slug: str) -> Optional[Link]:
        link_id = self.redis_repo.lookup(self.SLUG_INDEX, slug)
        if link_id is None:
            return None
        return self.get(link_id)

    def list_by_user(self, user_id: int) -> List[Link]:
        links = []
        for link_id in self.redis_repo.members(self._owner_key(user_id)):
            link = self.get(link_id)
            if link is not None:
                links.append(link)
        return links

    def update(self, link: Link) -> Link:
        """Overwrite a stored link, moving the slug claim if it changed."""
        previous = self.get(link.id)
        if previous is None:
            raise PersistenceError(f"Cannot update missing link {link.id}")

        if previous.slug != link.slug:
            if not self.redis_repo.claim(self.SLUG_INDEX, link.slug, link.id):
                raise DuplicatedSlugError(f"Slug already taken: {link.slug}")
            self.redis_repo.release(self.SLUG_INDEX, previous.slug)

        self.redis_repo.set_json(self._key(link.id), link.to_dict())
        return dataclasses.replace(link, user_storage_credential=None)

    def delete(self, link: Link) -> bool:
        deleted = self.redis_repo.delete(self._key(link.id))
        if self.redis_repo.lookup(self.SLUG_INDEX, link.slug) == link.id:
            self.redis_repo.release(self.SLUG_INDEX, link.slug)
        self.redis_repo.remove_member(self._owner_key(link.user_id), link.id)
        return deleted
