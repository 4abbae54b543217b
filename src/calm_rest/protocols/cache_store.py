"""Cache storage protocol.

Defines the interface for any key-value cache backend that can hold
serialized JSON responses with a per-item expiration.

Implementations can include:
- Redis (default)
- Memcached
- An in-process dictionary for tests
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Failures may be raised as any exception;
    the resource service treats every cache error as a miss.

    Example:
        ```python
        from calm_rest.protocols import CacheStore

        cache: CacheStore = RedisCacheRepository.create()
        ```
    """

    def get(self, key: str) -> bytes | None:
        """Fetch a cached value.

        Args:
            key: The cache key

        Returns:
            The cached bytes, or None on a miss
        """
        ...

    def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store a value.

        Args:
            key: The cache key
            value: Serialized payload
            ttl: Time-to-live in seconds
        """
        ...

    def delete(self, key: str) -> None:
        """Remove a value if present.

        Args:
            key: The cache key
        """
        ...
