"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handling.
Handlers depend on services, not directly on models or caches.

Architecture:
    Handler -> Service -> Model / CacheStore
    (HTTP)  -> (Logic) -> (Data Access)
"""

from .resource_handler import ResourceHandler
from .responses import (
    JSON_CONTENT_TYPE,
    JSON_TYPE,
    error_response,
    json_response,
    message_response,
)

__all__ = [
    "ResourceHandler",
    "JSON_CONTENT_TYPE",
    "JSON_TYPE",
    "error_response",
    "json_response",
    "message_response",
]
