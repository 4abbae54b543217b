"""Resource model protocols.

A model is the backend storage behind one mounted resource. Every
operation receives ``kvpairs``: the merged path and query parameters
that identify zero, one or all items of the collection.

Each capability is its own protocol so a model only implements what it
supports; the handler answers 405 for the rest and ``mount()`` only
registers routes for the capabilities present.

Models report domain failures by raising ``calm_rest.errors.HTTPError``
subclasses (``NotFoundError``, ``ConflictError``, ...). Any other
exception becomes a 500.
"""

from typing import Any, Protocol, runtime_checkable

from calm_rest.entities import Collection


@runtime_checkable
class Getter(Protocol):
    def get(self, kvpairs: dict[str, str]) -> Any | None:
        """Return the item identified by kvpairs, or None if absent.

        The result only needs to be JSON encodable; it does not have to
        be an instance of the resource's declared type.
        """
        ...


@runtime_checkable
class Lister(Protocol):
    def get_all(self, kvpairs: dict[str, str]) -> Collection | None:
        """Return every item in scope.

        Usually ``Materialized(items)`` or ``Streamed(source)``. Any other
        value is JSON encoded as is.
        """
        ...


@runtime_checkable
class Replacer(Protocol):
    def put(self, kvpairs: dict[str, str], value: Any) -> None:
        """Replace an existing item; raise NotFoundError if it does not exist."""
        ...


@runtime_checkable
class Patcher(Protocol):
    def patch(self, kvpairs: dict[str, str], original: Any, patched: Any) -> None:
        """Store ``patched``, the result of applying a JSON Patch to ``original``."""
        ...


@runtime_checkable
class Creator(Protocol):
    def post(self, kvpairs: dict[str, str], value: Any) -> str:
        """Add an item and return its identifier."""
        ...


@runtime_checkable
class Deleter(Protocol):
    def delete(self, kvpairs: dict[str, str]) -> None:
        """Delete an item; raise NotFoundError if it does not exist."""
        ...


@runtime_checkable
class BulkDeleter(Protocol):
    def delete_all(self, kvpairs: dict[str, str]) -> None:
        """Delete every item in scope."""
        ...


@runtime_checkable
class ResourceModel(Getter, Lister, Replacer, Patcher, Creator, Deleter, BulkDeleter, Protocol):
    """A model implementing every capability."""
