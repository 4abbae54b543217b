"""JSON serialization of model results."""

import json
import logging
from typing import Any

from fastapi.encoders import jsonable_encoder

from calm_rest.entities import Collection, Materialized, Streamed

logger = logging.getLogger(__name__)


def encode_json(value: Any) -> bytes:
    """Encode a model result as compact UTF-8 JSON.

    Pydantic models, dataclasses, datetimes and the like are converted
    with FastAPI's ``jsonable_encoder`` first.
    """
    return json.dumps(jsonable_encoder(value), separators=(",", ":"), ensure_ascii=False).encode()


def serialize_collection(collection: Collection) -> bytes:
    """Serialize a collection into one JSON array.

    Streamed items are written in arrival order. The first item that is
    an exception is raised, but only after the source has been read to
    the end: a producer blocked on a full channel would otherwise never
    finish.

    Args:
        collection: Materialized or Streamed items

    Returns:
        The JSON array as bytes

    Raises:
        Exception: The first error item of a streamed collection, or any
            encoding error
    """
    match collection:
        case Materialized(items=items):
            return encode_json(list(items))
        case Streamed(source=source):
            return _drain(source)
    raise TypeError(f"Unsupported collection type: {type(collection).__name__}")


def _drain(source) -> bytes:
    chunks: list[bytes] = []
    error: Exception | None = None
    count = 0

    for item in source:
        count += 1
        if error is not None:
            continue
        if isinstance(item, Exception):
            error = item
            continue
        try:
            chunks.append(encode_json(item))
        except Exception as e:
            error = e

    if error is not None:
        logger.debug("Discarded streamed collection after %d items: %s", count, error)
        raise error
    return b"[" + b",".join(chunks) + b"]"
