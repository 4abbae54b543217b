"""calm_rest - Cached REST resources over pluggable models.

This package maps HTTP requests onto CRUD operations of a backend
model, with read-through / write-invalidate response caching, content
negotiation and self-describing routes.

Layers:
    - protocols: Interface contracts (CacheStore, resource model capabilities)
    - repositories: Redis cache and in-memory model implementations
    - services: Cache keys, negotiation, serialization, ResourceService
    - handlers: HTTP dispatch and error translation
    - api: FastAPI routing, mounting and the demo app
    - dto: Data transfer objects (wire format)
    - entities: Domain models (internal)

Usage:
    ```python
    from fastapi import FastAPI
    from calm_rest import ResourceHandler, ResourceService, Router, install_error_handlers, mount

    service = ResourceService.create(name="books", data_type=Book, model=BookModel())
    app = FastAPI()
    install_error_handlers(app)
    mount(Router(app.router, "/books"), ResourceHandler(service=service))
    ```
"""

from calm_rest.api import Router, install_error_handlers, mount
from calm_rest.config import get_redis_client, get_settings, settings
from calm_rest.entities import Materialized, ResourceSpec, Streamed
from calm_rest.errors import (
    BadRequestError,
    ConflictError,
    HTTPError,
    InternalError,
    MethodNotAllowedError,
    NotAcceptableError,
    NotFoundError,
    TypeMismatchError,
)
from calm_rest.handlers import ResourceHandler
from calm_rest.protocols import CacheStore, ResourceModel
from calm_rest.repositories import InMemoryModel, RedisCacheRepository
from calm_rest.services import ResourceService

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "ResourceModel",
    # Services
    "ResourceService",
    # Handlers (HTTP)
    "ResourceHandler",
    "Router",
    "mount",
    "install_error_handlers",
    # Repositories
    "RedisCacheRepository",
    "InMemoryModel",
    # Entities
    "Materialized",
    "Streamed",
    "ResourceSpec",
    # Errors
    "HTTPError",
    "BadRequestError",
    "TypeMismatchError",
    "NotFoundError",
    "MethodNotAllowedError",
    "NotAcceptableError",
    "ConflictError",
    "InternalError",
]
