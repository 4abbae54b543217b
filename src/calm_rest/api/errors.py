"""Exception handlers rendering framework errors as JSON.

Unknown paths (404) and methods not mounted at a path (405) are raised
by Starlette before any resource handler runs; these handlers give
them the same ``{"statusCode": ..., "message": ...}`` body.
"""

import logging

from fastapi import FastAPI, Request, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from calm_rest.errors import HTTPError, InternalError
from calm_rest.handlers import error_response

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    error = HTTPError(str(exc.detail), exc.status_code)
    return error_response(request.method, str(request.url), error, headers=exc.headers)


async def calm_error_handler(request: Request, exc: HTTPError) -> Response:
    return error_response(request.method, str(request.url), exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error serving %s %s", request.method, request.url)
    return error_response(request.method, str(request.url), InternalError(str(exc) or type(exc).__name__))


def install_error_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers on an application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPError, calm_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
