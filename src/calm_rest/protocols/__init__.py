"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis -> Memcached, dict -> SQL, etc.)
- Unit testing with fake implementations
- Models that implement only some operations

Usage:
    ```python
    from calm_rest.protocols import CacheStore, ResourceModel

    cache: CacheStore = RedisCacheRepository.create()
    model: ResourceModel = InMemoryModel(items=[Item(id="1")])
    ```
"""

from .cache_store import CacheStore
from .resource_model import (
    BulkDeleter,
    Creator,
    Deleter,
    Getter,
    Lister,
    Patcher,
    Replacer,
    ResourceModel,
)

__all__ = [
    "CacheStore",
    "ResourceModel",
    "Getter",
    "Lister",
    "Replacer",
    "Patcher",
    "Creator",
    "Deleter",
    "BulkDeleter",
]
