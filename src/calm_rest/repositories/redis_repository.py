"""Redis implementation of CacheStore.

Stores serialized JSON responses as plain string values with a TTL.
The default response cache; any other CacheStore can replace it.
"""

import logging

import redis

from calm_rest.config import Settings, get_redis_client, settings as default_settings
from calm_rest.errors import CacheError

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis response cache.

    Satisfies CacheStore structurally; there is no base class to
    inherit from.

    Keys are namespaced with a prefix. Keys longer than
    ``max_key_length`` bytes and values larger than ``max_value_size``
    bytes are never stored, mirroring memcached's limits so either
    backend behaves the same. Connection errors surface as CacheError.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
        max_key_length: int | None = None,
        max_value_size: int | None = None,
    ) -> None:
        """Wrap a Redis client.

        Args:
            redis_client: Client to use. If None, one is built from settings.
            prefix: Namespace prepended to every key.
            max_key_length: Longest key accepted, in bytes, prefix included.
            max_value_size: Largest value accepted, in bytes.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = prefix or default_settings.cache_prefix
        self._max_key_length = max_key_length or default_settings.cache_max_key_length
        self._max_value_size = max_value_size or default_settings.cache_max_value_size

    @classmethod
    def create(cls, settings: Settings | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository from settings.

        Args:
            settings: Settings to read from. If None, uses the global settings.

        Returns:
            Configured RedisCacheRepository
        """
        settings = settings or default_settings
        return cls(
            redis_client=get_redis_client(settings),
            prefix=settings.cache_prefix,
            max_key_length=settings.cache_max_key_length,
            max_value_size=settings.cache_max_value_size,
        )

    def _full_key(self, key: str) -> str | None:
        full_key = f"{self._prefix}:{key}"
        if len(full_key.encode()) > self._max_key_length:
            logger.warning("Cache key too long, skipping: %.80s...", full_key)
            return None
        return full_key

    def get(self, key: str) -> bytes | None:
        """Fetch a cached value.

        Args:
            key: The cache key

        Returns:
            The cached bytes, or None on a miss or an unusable key

        Raises:
            CacheError: If Redis cannot be reached
        """
        full_key = self._full_key(key)
        if full_key is None:
            return None
        try:
            value = self._client.get(full_key)
        except redis.RedisError as e:
            raise CacheError(f"redis GET failed: {e}") from e
        return value  # type: ignore[return-value]

    def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store a value with a time-to-live.

        Args:
            key: The cache key
            value: Serialized payload
            ttl: Time-to-live in seconds; values <= 0 store without expiry

        Raises:
            CacheError: If Redis cannot be reached
        """
        full_key = self._full_key(key)
        if full_key is None:
            return
        if len(value) > self._max_value_size:
            logger.warning("Cache value too big, skipping: key %s, %d bytes", full_key, len(value))
            return
        try:
            if ttl > 0:
                self._client.set(full_key, value, ex=ttl)
            else:
                self._client.set(full_key, value)
        except redis.RedisError as e:
            raise CacheError(f"redis SET failed: {e}") from e

    def delete(self, key: str) -> None:
        """Remove a value if present.

        Args:
            key: The cache key

        Raises:
            CacheError: If Redis cannot be reached
        """
        full_key = self._full_key(key)
        if full_key is None:
            return
        try:
            self._client.delete(full_key)
        except redis.RedisError as e:
            raise CacheError(f"redis DELETE failed: {e}") from e

    def count_all(self) -> int:
        """Count cached entries under the prefix.

        Returns:
            Number of keys under the prefix
        """
        count = 0
        for _ in self._client.scan_iter(match=f"{self._prefix}:*"):
            count += 1
        return count

    def health_check(self) -> bool:
        """Ping Redis.

        Returns:
            True if Redis answered the ping
        """
        try:
            result = self._client.ping()
            return bool(result)
        except redis.RedisError:
            return False

    def get_stats(self) -> dict:
        """Describe the cache for the stats endpoint.

        Returns:
            Prefix, entry count and size limits
        """
        return {
            "prefix": self._prefix,
            "total_entries": self.count_all(),
            "max_key_length": self._max_key_length,
            "max_value_size": self._max_value_size,
        }

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
