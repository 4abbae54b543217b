"""JSON response builders shared by handlers and exception handlers."""

import logging

from fastapi import Response, status

from calm_rest.dto import ErrorResponse, MessageResponse
from calm_rest.errors import HTTPError

logger = logging.getLogger(__name__)

JSON_TYPE = "application/json"
JSON_CONTENT_TYPE = f"{JSON_TYPE}; charset=utf-8"


def log_status(method: str, url: str, status_code: int, message: str) -> None:
    """Log a response status, louder the worse it is."""
    line = f"{method} {url}: {status_code} {message}"
    if status_code < 400:
        logger.info(line)
    elif status_code < 500:
        logger.warning(line)
    else:
        logger.error(line)


def json_response(
    payload: bytes,
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> Response:
    """Wrap already-serialized JSON in a response."""
    return Response(content=payload, status_code=status_code, headers=headers, media_type=JSON_CONTENT_TYPE)


def message_response(
    method: str,
    url: str,
    message: str,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    """Send ``{"message": ...}`` with the given status."""
    log_status(method, url, status_code, message)
    body = MessageResponse(message=message).model_dump_json().encode()
    return json_response(body, status_code)


def error_response(method: str, url: str, error: HTTPError, headers: dict[str, str] | None = None) -> Response:
    """Send ``{"statusCode": ..., "message": ...}`` with the error's status."""
    status_code = int(error.status_code)
    log_status(method, url, status_code, error.message)
    body = ErrorResponse(status_code=status_code, message=error.message).model_dump_json(by_alias=True).encode()
    return json_response(body, status_code, headers=headers)
