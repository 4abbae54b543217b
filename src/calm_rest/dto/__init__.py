"""Data Transfer Objects for API contracts.

These Pydantic models define the external wire format of responses.
Internal domain logic should use entities from the entities package.
"""

from .responses import (
    CreatedResponse,
    ErrorResponse,
    MessageResponse,
    MethodIntro,
    RouteIntro,
)

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "CreatedResponse",
    "MethodIntro",
    "RouteIntro",
]
