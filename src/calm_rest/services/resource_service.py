"""Resource service for core request logic.

This service sits between the HTTP handler and the resource model. It
decides which model operation to call, serializes results, and keeps
the response cache coherent: reads go through the cache, successful
writes invalidate the affected entries.
"""

import json
import logging
from collections.abc import Callable
from typing import Any, NoReturn

import jsonpatch
from fastapi.encoders import jsonable_encoder
from pydantic import TypeAdapter, ValidationError

from calm_rest.config import Settings, settings as default_settings
from calm_rest.entities import Materialized, ResourceSpec, Streamed
from calm_rest.errors import (
    TYPE_MISMATCH,
    BadRequestError,
    MethodNotAllowedError,
    NotFoundError,
    TypeMismatchError,
)
from calm_rest.protocols import (
    BulkDeleter,
    CacheStore,
    Creator,
    Deleter,
    Getter,
    Lister,
    Patcher,
    Replacer,
)
from calm_rest.services.cache_keys import build_key
from calm_rest.services.serializer import encode_json, serialize_collection

logger = logging.getLogger(__name__)


class ResourceService:
    """Cache-aware CRUD orchestration for one resource.

    This service depends on PROTOCOLS, not concrete implementations:
    - the model only needs the capabilities it wants to serve
    - CacheStore: can be Redis, Memcached, a dict, or None for no cache

    Example:
        ```python
        from calm_rest.services import ResourceService

        service = ResourceService.create(
            name="stuff",
            data_type=Item,
            model=InMemoryModel(),
            cache=RedisCacheRepository.create(),
        )
        payload = service.read_single({"id": "1"})
        ```
    """

    def __init__(
        self,
        spec: ResourceSpec,
        model: object,
        cache: CacheStore | None = None,
    ) -> None:
        """Initialize the resource service.

        Args:
            spec: Static description of the resource (required).
            model: Backend implementing some of the capability protocols (required).
            cache: Response cache. Caching also needs ``spec.expiration > 0``.
        """
        self._spec = spec
        self._model = model
        self._cache = cache
        self._adapter: TypeAdapter[Any] = TypeAdapter(spec.data_type)

    @classmethod
    def create(
        cls,
        name: str,
        data_type: Any,
        model: object,
        cache: CacheStore | None = None,
        settings: Settings | None = None,
    ) -> "ResourceService":
        """Factory method building the ResourceSpec from settings.

        Args:
            name: Unique resource name.
            data_type: Type request bodies are decoded into.
            model: Backend model.
            cache: Optional response cache.
            settings: Settings to read defaults from. If None, uses the global settings.

        Returns:
            Configured ResourceService instance
        """
        spec = ResourceSpec.from_settings(name, data_type, settings or default_settings)
        return cls(spec=spec, model=model, cache=cache)

    # -- reads -------------------------------------------------------------

    def read_single(self, kvpairs: dict[str, str]) -> bytes:
        """Return the JSON of the item identified by kvpairs.

        Business logic:
        1. Serve from cache on a hit
        2. Otherwise call the model's ``get``; None means 404
        3. Serialize and cache the result

        Raises:
            NotFoundError: If the model has no such item
            MethodNotAllowedError: If the model cannot get single items
        """
        getter = self._require(Getter)

        def load() -> bytes:
            value = getter.get(kvpairs)
            if value is None:
                raise NotFoundError()
            return encode_json(value)

        return self._read_through(self.item_key(kvpairs), load)

    def read_all(self, kvpairs: dict[str, str]) -> bytes:
        """Return the JSON array of every item in scope.

        The model may return a materialized list or a stream; streams are
        drained completely even when an item turns out to be an error.

        Raises:
            NotFoundError: If the model returns None
            MethodNotAllowedError: If the model cannot list items
        """
        lister = self._require(Lister)

        def load() -> bytes:
            result = lister.get_all(kvpairs)
            if result is None:
                raise NotFoundError()
            if isinstance(result, (Materialized, Streamed)):
                return serialize_collection(result)
            return encode_json(result)

        return self._read_through(self.collection_key(kvpairs), load)

    # -- writes ------------------------------------------------------------

    def put(self, kvpairs: dict[str, str], body: bytes) -> None:
        """Replace an existing item with the decoded request body.

        Raises:
            TypeMismatchError: If the body does not decode into the resource type
            NotFoundError: If the item does not exist (PUT never creates)
        """
        replacer = self._require(Replacer)
        value = self.decode(body)
        replacer.put(kvpairs, value)
        self.invalidate(kvpairs)

    def put_all(self, kvpairs: dict[str, str], body: bytes) -> NoReturn:
        """Bulk replace is not supported."""
        raise MethodNotAllowedError()

    def patch(self, kvpairs: dict[str, str], body: bytes) -> None:
        """Apply a JSON Patch (RFC 6902) document to an existing item.

        Business logic:
        1. Parse the patch document
        2. Fetch the current item
        3. Apply the patch to its JSON form and decode the result
        4. Hand original and patched values to the model

        Raises:
            BadRequestError: If the patch is malformed or cannot be applied
            TypeMismatchError: If the patched document is not a valid item
            NotFoundError: If the item does not exist
        """
        getter = self._require(Getter)
        patcher = self._require(Patcher)

        try:
            patch = jsonpatch.JsonPatch(json.loads(body))
        except (jsonpatch.JsonPatchException, jsonpatch.JsonPointerException, ValueError, TypeError) as e:
            raise BadRequestError(f"Invalid JSON Patch: {e}") from e

        original = getter.get(kvpairs)
        if original is None:
            raise NotFoundError()

        document = jsonable_encoder(original)
        logger.debug("%s original: %s", self._spec.name, document)
        try:
            document = patch.apply(document)
        except (jsonpatch.JsonPatchException, jsonpatch.JsonPointerException) as e:
            raise BadRequestError(f"Cannot apply patch: {e}") from e
        logger.debug("%s patched: %s", self._spec.name, document)

        try:
            patched = self._adapter.validate_python(document)
        except ValidationError as e:
            raise TypeMismatchError(_describe(e)) from e

        patcher.patch(kvpairs, original, patched)
        self.invalidate(kvpairs)

    def post(self, kvpairs: dict[str, str], body: bytes) -> str:
        """Add a new item and return its identifier.

        Only the collection entry is invalidated: no existing item changed.

        Raises:
            TypeMismatchError: If the body does not decode into the resource type
        """
        creator = self._require(Creator)
        value = self.decode(body)
        item_id = creator.post(kvpairs, value)
        self.invalidate(kvpairs, item=False)
        return str(item_id)

    def delete(self, kvpairs: dict[str, str]) -> None:
        """Delete one item.

        Raises:
            NotFoundError: If the item does not exist
        """
        deleter = self._require(Deleter)
        deleter.delete(kvpairs)
        self.invalidate(kvpairs)

    def delete_all(self, kvpairs: dict[str, str]) -> None:
        """Delete every item in scope, if the resource allows it.

        Raises:
            MethodNotAllowedError: If ``allow_delete_all`` is off or the
                model cannot delete in bulk
        """
        if not self._spec.allow_delete_all:
            raise MethodNotAllowedError()
        bulk_deleter = self._require(BulkDeleter)
        bulk_deleter.delete_all(kvpairs)
        self.invalidate(kvpairs, item=False)

    # -- helpers -----------------------------------------------------------

    def decode(self, body: bytes) -> Any:
        """Decode a JSON request body into a new instance of the resource type."""
        try:
            return self._adapter.validate_json(body)
        except ValidationError as e:
            raise TypeMismatchError(_describe(e)) from e

    def supports(self, capability: type) -> bool:
        """Check whether the model implements a capability protocol."""
        return isinstance(self._model, capability)

    def item_key(self, kvpairs: dict[str, str]) -> str:
        return build_key(self._spec.name, kvpairs, self._spec.primary_key)

    def collection_key(self, kvpairs: dict[str, str]) -> str:
        return build_key(self._spec.name, kvpairs, self._spec.primary_key, collection=True)

    def invalidate(self, kvpairs: dict[str, str], item: bool = True) -> None:
        """Drop cached entries made stale by a successful write.

        Args:
            kvpairs: Scope of the write
            item: Also drop the single item entry
        """
        if not self.cache_enabled:
            return
        if item:
            self._cache_delete(self.item_key(kvpairs))
        self._cache_delete(self.collection_key(kvpairs))

    def _require(self, capability: type) -> Any:
        if not isinstance(self._model, capability):
            logger.debug("%s model does not implement %s", self._spec.name, capability.__name__)
            raise MethodNotAllowedError()
        return self._model

    def _read_through(self, key: str, load: Callable[[], bytes]) -> bytes:
        if self.cache_enabled:
            cached = self._cache_get(key)
            if cached is not None:
                return cached

        payload = load()

        if self.cache_enabled:
            self._cache_set(key, payload)
        return payload

    def _cache_get(self, key: str) -> bytes | None:
        try:
            value = self._cache.get(key)
        except Exception as e:
            logger.warning("Cache get '%s' failed: %s", key, e)
            return None
        logger.debug("Cache get '%s': %s", key, "hit" if value is not None else "miss")
        return value

    def _cache_set(self, key: str, value: bytes) -> None:
        if len(value) > self._spec.max_value_size:
            logger.warning(
                "Cannot cache, value too big: resource %s, key %s, %d bytes",
                self._spec.name,
                key,
                len(value),
            )
            return
        try:
            self._cache.set(key, value, self._spec.expiration)
        except Exception as e:
            logger.warning("Cache set '%s' failed: %s", key, e)
            return
        logger.debug("Cache set '%s'", key)

    def _cache_delete(self, key: str) -> None:
        try:
            self._cache.delete(key)
        except Exception as e:
            logger.warning("Cache delete '%s' failed: %s", key, e)
            return
        logger.debug("Cache delete '%s'", key)

    @property
    def spec(self) -> ResourceSpec:
        """Get the resource description."""
        return self._spec

    @property
    def model(self) -> object:
        """Get the underlying model (for testing)."""
        return self._model

    @property
    def cache(self) -> CacheStore | None:
        """Get the underlying cache (for testing)."""
        return self._cache

    @property
    def cache_enabled(self) -> bool:
        """Whether reads and writes touch the cache."""
        return self._cache is not None and self._spec.cache_enabled


def _describe(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return TYPE_MISMATCH
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{TYPE_MISMATCH}: {location}: {first.get('msg', '')}"
    return f"{TYPE_MISMATCH}: {first.get('msg', '')}"
