"""
Redis credential store adapter - Implements CredentialStore protocol.

Keys map one-to-one onto Redis keys, so the network layer (e.g. a
RADIUS server) can read active credentials straight from Redis.

Atomicity:
- SET with EX writes value and TTL in one command.
- RENAME is atomic server-side and carries the remaining TTL over to
  the new key, which is exactly the pending -> active transition.
"""

import logging

import redis

from guestpass.domain.exceptions import SourceKeyMissing, StoreError

logger = logging.getLogger(__name__)


class RedisCredentialStore:
    """
    Implements CredentialStore protocol via redis-py.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Every call is a single command with no client-side retries.
    """

    def __init__(self, client: redis.Redis) -> None:
        """
        Initialize store with a Redis client.

        Args:
            client: redis.Redis created with decode_responses=True
        """
        self._client = client

    @classmethod
    def from_url(cls, url: str, timeout_seconds: float = 5.0) -> "RedisCredentialStore":
        """Create a store from a redis:// URL."""
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=timeout_seconds,
            socket_connect_timeout=timeout_seconds,
        )
        return cls(client)

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except redis.RedisError as e:
            logger.error("Redis GET failed for %s: %s", key, e)
            raise StoreError("get failed") from e

    def set_with_ttl(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as e:
            logger.error("Redis SET failed for %s: %s", key, e)
            raise StoreError("set failed") from e

    def rename(self, old_key: str, new_key: str) -> None:
        try:
            self._client.rename(old_key, new_key)
        except redis.ResponseError as e:
            if "no such key" in str(e).lower():
                raise SourceKeyMissing(old_key) from e
            logger.error("Redis RENAME failed for %s -> %s: %s", old_key, new_key, e)
            raise StoreError("rename failed") from e
        except redis.RedisError as e:
            logger.error("Redis RENAME failed for %s -> %s: %s", old_key, new_key, e)
            raise StoreError("rename failed") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as e:
            logger.error("Redis DEL failed for %s: %s", key, e)
            raise StoreError("delete failed") from e

    def ttl(self, key: str) -> int | None:
        try:
            remaining = self._client.ttl(key)
        except redis.RedisError as e:
            raise StoreError("ttl failed") from e
        # -2: key missing, -1: key without expiry
        if remaining == -2:
            return None
        return remaining

    def close(self) -> None:
        self._client.close()
