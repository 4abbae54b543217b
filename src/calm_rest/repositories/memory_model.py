"""In-memory resource model.

A dictionary-backed model implementing every capability protocol. It
backs the demo application and the tests, and is a template for real
models.
"""

import dataclasses
import logging
import threading
from typing import Any

from pydantic import BaseModel

from calm_rest.entities import Materialized, Streamed
from calm_rest.errors import BadRequestError, ConflictError, NotFoundError
from calm_rest.utils import ItemChannel

logger = logging.getLogger(__name__)


class InMemoryModel:
    """Keeps every item in a dict keyed by its id field.

    This class satisfies the ResourceModel protocol through structural
    typing. Items may be pydantic models, dataclasses or dicts.

    Example:
        ```python
        model = InMemoryModel(id_field="id", key="id")
        service = ResourceService.create(name="stuff", data_type=Item, model=model)
        ```
    """

    def __init__(
        self,
        id_field: str = "id",
        key: str = "id",
        items: list[Any] | None = None,
        stream: bool = False,
    ) -> None:
        """Initialize the model.

        Args:
            id_field: Name of the id attribute inside each item.
            key: Name of the kvpairs field carrying the id.
            items: Initial items.
            stream: Return listings as a stream fed by a producer thread.
        """
        self._id_field = id_field
        self._key = key
        self._stream = stream
        self._lock = threading.Lock()
        self._items: dict[str, Any] = {}
        for item in items or []:
            self._items[self._id_of(item)] = item

    def get(self, kvpairs: dict[str, str]) -> Any | None:
        with self._lock:
            return self._items.get(kvpairs.get(self._key, ""))

    def get_all(self, kvpairs: dict[str, str]) -> Materialized | Streamed:
        with self._lock:
            snapshot = [self._items[item_id] for item_id in sorted(self._items)]
        if not self._stream:
            return Materialized(snapshot)

        def produce(channel: ItemChannel) -> None:
            for item in snapshot:
                channel.send(item)

        return Streamed.from_producer(produce, name=f"{type(self).__name__}-get_all")

    def put(self, kvpairs: dict[str, str], value: Any) -> None:
        item_id = self._require_key(kvpairs)
        with self._lock:
            if item_id not in self._items:
                raise NotFoundError()
            self._items[item_id] = self._with_id(value, item_id)

    def patch(self, kvpairs: dict[str, str], original: Any, patched: Any) -> None:
        item_id = self._require_key(kvpairs)
        with self._lock:
            if item_id not in self._items:
                raise NotFoundError()
            self._items[item_id] = self._with_id(patched, item_id)

    def post(self, kvpairs: dict[str, str], value: Any) -> str:
        item_id = self._id_of(value)
        if not item_id:
            raise BadRequestError(f'Missing field "{self._id_field}"')
        with self._lock:
            if item_id in self._items:
                raise ConflictError()
            self._items[item_id] = value
        logger.debug("Added item %s", item_id)
        return item_id

    def delete(self, kvpairs: dict[str, str]) -> None:
        item_id = self._require_key(kvpairs)
        with self._lock:
            if self._items.pop(item_id, None) is None:
                raise NotFoundError()

    def delete_all(self, kvpairs: dict[str, str]) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def _require_key(self, kvpairs: dict[str, str]) -> str:
        item_id = kvpairs.get(self._key)
        if not item_id:
            raise BadRequestError(f'Must have variable "{self._key}" in path')
        return item_id

    def _id_of(self, value: Any) -> str:
        if isinstance(value, dict):
            item_id = value.get(self._id_field)
        else:
            item_id = getattr(value, self._id_field, None)
        return "" if item_id is None else str(item_id)

    def _with_id(self, value: Any, item_id: str) -> Any:
        # The path decides the id; a body naming another id must not move the item.
        if self._id_of(value) == item_id:
            return value
        if isinstance(value, BaseModel):
            return value.model_copy(update={self._id_field: item_id})
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return dataclasses.replace(value, **{self._id_field: item_id})
        if isinstance(value, dict):
            return {**value, self._id_field: item_id}
        return value
