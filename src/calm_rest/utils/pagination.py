"""Cursor pagination over a serialized JSON array."""

import json
import math

from calm_rest.errors import BadRequestError, NotFoundError, TypeMismatchError


def paginate_json(payload: bytes, last: str, limit: int, id_field: str = "id") -> bytes:
    """Slice a JSON array of objects by id cursor.

    Returns at most ``limit`` items starting from the first item whose id
    is greater than ``last``. Ids must all be numbers or all be strings;
    numbers are compared numerically. An empty ``last`` starts from the
    beginning.

    Args:
        payload: JSON array of objects, each carrying ``id_field``
        last: Id of the last item the client has seen
        limit: Maximum number of items to return
        id_field: Name of the id member in each object

    Returns:
        The selected items as a JSON array

    Raises:
        TypeMismatchError: If the payload is not an array of objects
        BadRequestError: If ids are of mixed or unsupported type, or
            ``last`` is not a number while ids are
        NotFoundError: If no item comes after ``last``
    """
    items = json.loads(payload)
    if not isinstance(items, list):
        raise TypeMismatchError()
    if not items:
        return payload
    if limit <= 0:
        raise BadRequestError(f"limit must be positive, got {limit}")

    first = items[0]
    if not isinstance(first, dict):
        raise TypeMismatchError()
    sample = first.get(id_field)

    if isinstance(sample, (int, float)) and not isinstance(sample, bool):
        try:
            cursor: int | float | str = float(last) if last else float("-inf")
        except ValueError:
            raise BadRequestError(f"last must be a number, got {last!r}") from None
        if last and not math.isfinite(cursor):
            raise BadRequestError(f"last must be a finite number, got {last!r}")
        id_type: type | tuple[type, ...] = (int, float)
    elif isinstance(sample, str):
        cursor = last
        id_type = str
    else:
        raise BadRequestError(f"Unrecognized type of {id_field}: {sample!r}")

    for start, item in enumerate(items):
        if not isinstance(item, dict):
            raise TypeMismatchError()
        item_id = item.get(id_field)
        if not isinstance(item_id, id_type) or isinstance(item_id, bool):
            raise BadRequestError(f"Inconsistent type of {id_field}")
        if item_id > cursor:
            break
    else:
        raise NotFoundError()

    page = items[start : start + limit]
    return json.dumps(page, separators=(",", ":"), ensure_ascii=False).encode()
