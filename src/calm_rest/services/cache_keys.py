"""Cache key construction.

Keys must come out identical on the read path and on the invalidation
path, so both go through ``build_key``.
"""

from collections.abc import Mapping
from urllib.parse import quote


def build_key(
    resource_name: str,
    kvpairs: Mapping[str, str],
    primary_key: str,
    collection: bool = False,
) -> str:
    """Build a deterministic cache key for a request scope.

    Parameters are emitted in lexicographic name order, so the order in
    which query parameters arrived does not matter. Names and values are
    percent-encoded so separators inside values cannot collide.

    In collection mode the primary key is left out, so every listing of
    the resource shares one key that differs from any single item's key.
    An empty primary key is treated as absent in both modes.

    Args:
        resource_name: Unique name of the resource
        kvpairs: Merged path and query parameters
        primary_key: Name of the primary key parameter
        collection: Build the key for the collection entry

    Returns:
        The cache key

    Example:
        ```python
        build_key("stuff", {"id": "5"}, "id")                   # "stuff/id=5"
        build_key("stuff", {"id": "5"}, "id", collection=True)  # "stuff/"
        ```
    """
    parts = []
    for name in sorted(kvpairs):
        value = kvpairs[name]
        if name == primary_key and (collection or not value):
            continue
        parts.append(f"{quote(name, safe='')}={quote(value, safe='')}")
    return f"{quote(resource_name, safe='')}/{'&'.join(parts)}"
