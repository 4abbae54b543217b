"""Resource description domain entity."""

from dataclasses import dataclass
from typing import Any

from calm_rest.config import Settings


@dataclass(frozen=True)
class ResourceSpec:
    """Static description of one mounted resource.

    Attributes:
        name: Unique resource name, also the cache key namespace
        data_type: Type request bodies are decoded into (pydantic model,
            dataclass, TypedDict or any type pydantic can validate)
        primary_key: kvpairs field naming a single item
        expiration: Cache time-to-live in seconds; 0 disables caching
        allow_delete_all: Whether DELETE on the collection is honoured
        page_size: Default page size for collection reads; 0 disables paging
        max_value_size: Largest payload written to the cache, in bytes
    """

    name: str
    data_type: Any
    primary_key: str = "id"
    expiration: int = 0
    allow_delete_all: bool = False
    page_size: int = 0
    max_value_size: int = 1_000_000

    @property
    def cache_enabled(self) -> bool:
        return self.expiration > 0

    @classmethod
    def from_settings(cls, name: str, data_type: Any, settings: Settings) -> "ResourceSpec":
        """Build a spec using the resource defaults from settings."""
        return cls(
            name=name,
            data_type=data_type,
            primary_key=settings.primary_key,
            expiration=settings.cache_expiration,
            allow_delete_all=settings.allow_delete_all,
            page_size=settings.page_size,
            max_value_size=settings.cache_max_value_size,
        )
