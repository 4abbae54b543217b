"""Repository layer for data access.

This layer holds concrete implementations of the protocols: the Redis
response cache and an in-memory resource model.

The repositories are protocol-based (structural typing), not
inheritance-based. Any class implementing the required methods will
satisfy the protocol.
"""

from calm_rest.protocols import CacheStore, ResourceModel

from .memory_model import InMemoryModel
from .redis_repository import RedisCacheRepository

__all__ = [
    "CacheStore",
    "ResourceModel",
    "InMemoryModel",
    "RedisCacheRepository",
]
