"""Service layer for request logic.

This layer contains the dispatch decisions, caching and serialization.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Model / CacheStore
    (HTTP)  -> (Logic) -> (Data Access)

Usage:
    ```python
    from calm_rest.services import ResourceService

    # Using factory method (recommended)
    service = ResourceService.create(name="stuff", data_type=Item, model=model)

    # Or manual creation
    service = ResourceService(spec=ResourceSpec("stuff", Item), model=model, cache=cache)
    ```
"""

from .cache_keys import build_key
from .negotiation import accepts_json
from .resource_service import ResourceService
from .serializer import encode_json, serialize_collection

__all__ = [
    "ResourceService",
    "accepts_json",
    "build_key",
    "encode_json",
    "serialize_collection",
]
