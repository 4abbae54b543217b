"""HTTP handler dispatching requests to a resource service.

The handler owns every HTTP concern: content negotiation, merging
query parameters into kvpairs, picking the operation from the method
and the presence of a primary key, status codes, and turning every
error into a JSON response. It is the only place where errors are
caught.
"""

import logging
from urllib.parse import quote

from fastapi import Request, Response, status
from starlette.concurrency import run_in_threadpool

from calm_rest.dto import CreatedResponse
from calm_rest.errors import (
    SUCCESS,
    BadRequestError,
    HTTPError,
    InternalError,
    MethodNotAllowedError,
    NotAcceptableError,
)
from calm_rest.services import ResourceService, accepts_json
from calm_rest.utils import paginate_json

from .responses import error_response, json_response, message_response

logger = logging.getLogger(__name__)


class ResourceHandler:
    """HTTP entry point for one resource.

    Example:
        ```python
        handler = ResourceHandler(service=ResourceService.create(...))

        @app.api_route("/stuff/{id}", methods=["GET", "PUT", "PATCH", "DELETE"])
        async def item(request: Request) -> Response:
            return await handler.handle(request)
        ```
    """

    def __init__(self, service: ResourceService) -> None:
        """Initialize the resource handler.

        Args:
            service: The resource service for request logic (required).
        """
        self._service = service

    async def handle(self, request: Request, kvpairs: dict[str, str] | None = None) -> Response:
        """Serve one request.

        Args:
            request: The incoming request
            kvpairs: Path parameters; defaults to the route's path parameters

        Returns:
            A JSON response, success or error
        """
        params = request.path_params if kvpairs is None else kvpairs
        kvpairs = {name: str(value) for name, value in params.items()}
        method = request.method
        url = str(request.url)

        try:
            accept = request.headers.getlist("accept")
            if not accepts_json(accept):
                logger.warning("%s is not supported", accept)
                raise NotAcceptableError()

            # Query values overwrite path values; only the first of repeated values counts.
            for name in request.query_params.keys():
                kvpairs[name] = request.query_params.getlist(name)[0]

            body = await request.body()
            location = str(request.url.replace(query=""))
            return await run_in_threadpool(self.dispatch, method, url, kvpairs, body, location)
        except HTTPError as e:
            return error_response(method, url, e)
        except Exception as e:
            logger.exception("Unhandled error serving %s %s", method, url)
            return error_response(method, url, InternalError(str(e) or type(e).__name__))

    def dispatch(
        self,
        method: str,
        url: str,
        kvpairs: dict[str, str],
        body: bytes = b"",
        location: str = "",
    ) -> Response:
        """Pick and run the operation for a method and kvpairs.

        Blocking: runs model and cache calls directly. ``handle`` calls
        it from the thread pool.

        Args:
            method: HTTP method
            url: Request URL, for logging
            kvpairs: Merged path and query parameters
            body: Raw request body
            location: Collection URL used to build the Location of new items

        Returns:
            The success response

        Raises:
            HTTPError: For every client-visible failure
        """
        service = self._service
        has_key = bool(kvpairs.get(service.spec.primary_key))

        match method, has_key:
            case ("GET" | "HEAD", True):
                return json_response(service.read_single(kvpairs))
            case ("GET" | "HEAD", False):
                return json_response(self._read_collection(kvpairs))
            case ("PUT", True):
                service.put(kvpairs, body)
                return message_response(method, url, SUCCESS)
            case ("PUT", False):
                service.put_all(kvpairs, body)
            case ("PATCH", True):
                service.patch(kvpairs, body)
                return message_response(method, url, SUCCESS)
            case ("POST", False):
                item_id = service.post(kvpairs, body)
                return self._created(item_id, location)
            case ("DELETE", True):
                service.delete(kvpairs)
                return message_response(method, url, SUCCESS)
            case ("DELETE", False):
                service.delete_all(kvpairs)
                return message_response(method, url, SUCCESS)
        raise MethodNotAllowedError()

    def _read_collection(self, kvpairs: dict[str, str]) -> bytes:
        page_size = self._service.spec.page_size
        if not page_size:
            return self._service.read_all(kvpairs)

        # Paging parameters select a window of the listing, not its scope.
        last = kvpairs.pop("last", "")
        limit_text = kvpairs.pop("limit", "")
        try:
            limit = int(limit_text) if limit_text else page_size
        except ValueError:
            raise BadRequestError(f"limit must be an integer, got {limit_text!r}") from None

        payload = self._service.read_all(kvpairs)
        return paginate_json(payload, last, limit, id_field=self._service.spec.primary_key)

    def _created(self, item_id: str, location: str) -> Response:
        headers = {}
        if location:
            headers["Location"] = f"{location.rstrip('/')}/{quote(item_id, safe='')}"
            logger.info("Post Location: %s", headers["Location"])
        body = CreatedResponse(id=item_id).model_dump_json().encode()
        return json_response(body, status.HTTP_201_CREATED, headers=headers)

    @property
    def service(self) -> ResourceService:
        """Get the underlying service."""
        return self._service
