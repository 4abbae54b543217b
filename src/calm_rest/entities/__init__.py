"""Domain entities for internal representation.

These are frozen dataclasses used by services, handlers and models.
They are NOT used for API contracts - use DTOs from the dto package
for that.
"""

from .collection import Collection, Materialized, Streamed
from .resource import ResourceSpec

__all__ = ["Collection", "Materialized", "Streamed", "ResourceSpec"]
