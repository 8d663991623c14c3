"""
Redis Repository Base Class

Provides JSON documents, ID counters, unique index hashes and membership
sets on top of a Redis client. Entity repositories build on it.
"""

import json
from typing import Any, Dict, List, Optional

import redis
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.retry import Retry

from domain.errors import PersistenceError


class RedisRepository:
    """Base Redis repository with atomic primitives for document storage."""

    def __init__(self, redis_client: redis.Redis, key_prefix: str = ""):
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        """Create a prefixed key for Redis storage."""
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def set_json(self, key: str, data: Dict[str, Any], ttl: Optional[int] = None) -> None:
        """
        Store a dictionary as JSON with optional TTL.

        Args:
            key: Redis key
            data: Dictionary to store as JSON
            ttl: Time to live in seconds

        Raises:
            PersistenceError: If the data cannot be serialized or stored
        """
        redis_key = self._make_key(key)
        try:
            json_data = json.dumps(data)
        except TypeError as e:
            raise PersistenceError(f"Cannot serialize data for key {key}", e)

        if ttl:
            stored = self.redis.setex(redis_key, ttl, json_data)
        else:
            stored = self.redis.set(redis_key, json_data)
        if not stored:
            raise PersistenceError(f"Redis refused to store key {key}")

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Get JSON data from Redis.

        Returns:
            Dictionary if found, None otherwise

        Raises:
            PersistenceError: If the stored value is not valid JSON
        """
        redis_key = self._make_key(key)
        data = self.redis.get(redis_key)

        if data is None:
            return None

        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Corrupt JSON stored under key {key}", e)

    def delete(self, key: str) -> bool:
        """
        Delete a key from Redis.

        Returns:
            True if key was deleted, False otherwise
        """
        return self.redis.delete(self._make_key(key)) > 0

    def exists(self, key: str) -> bool:
        """Check if a key exists in Redis."""
        return self.redis.exists(self._make_key(key)) > 0

    def next_id(self, counter: str) -> int:
        """Atomically allocate the next integer ID from a counter."""
        return int(self.redis.incr(self._make_key(f"counter:{counter}")))

    def claim(self, index: str, value: str, owner_id: int) -> bool:
        """
        Claim a unique value in an index hash.

        Returns:
            True if the value was free (or already held by owner_id),
            False if another owner holds it
        """
        redis_key = self._make_key(f"index:{index}")
        if self.redis.hsetnx(redis_key, value, owner_id):
            return True
        holder = self.redis.hget(redis_key, value)
        return holder is not None and int(holder) == owner_id

    def lookup(self, index: str, value: str) -> Optional[int]:
        """Return the ID holding a value in an index hash, if any."""
        holder = self.redis.hget(self._make_key(f"index:{index}"), value)
        return int(holder) if holder is not None else None

    def release(self, index: str, value: str) -> None:
        """Remove a value from an index hash."""
        self.redis.hdel(self._make_key(f"index:{index}"), value)

    def add_member(self, key: str, member_id: int) -> None:
        self.redis.sadd(self._make_key(key), member_id)

    def remove_member(self, key: str, member_id: int) -> None:
        self.redis.srem(self._make_key(key), member_id)

    def members(self, key: str) -> List[int]:
        """Return the integer members of a set, sorted ascending."""
        return sorted(int(member) for member in self.redis.smembers(self._make_key(key)))


class RedisConnectionManager:
    """Manages Redis connection with connection pooling."""

    def __init__(self, host: str = 'localhost', port: int = 6379, db: int = 0,
                 password: Optional[str] = None, max_connections: int = 20,
                 decode_responses: bool = False):
        self.connection_pool = redis.ConnectionPool(
            host=host,
            port=port,
            db=db,
            password=password,
            max_connections=max_connections,
            decode_responses=decode_responses,
            retry=Retry(NoBackoff(), 0),
            socket_keepalive=True,
            socket_keepalive_options={}
        )
        self._client = None

    @property
    def client(self) -> redis.Redis:
        """Get Redis client instance with connection pooling."""
        if self._client is None:
            self._client = redis.Redis(connection_pool=self.connection_pool)
        return self._client

    def health_check(self) -> bool:
        """Check if Redis connection is healthy."""
        try:
            return self.client.ping()
        except RedisConnectionError:
            return False

    def close(self):
        """Close the connection pool."""
        if self.connection_pool:
            self.connection_pool.disconnect()
