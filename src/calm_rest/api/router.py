"""Self-describing routes on top of FastAPI.

A ``Router`` handles every method under one path template. It records
a description for each method, answers OPTIONS with an ``Allow``
header, and can describe itself and its sub paths as JSON.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping

from fastapi import APIRouter, Request, Response, status
from pydantic import TypeAdapter

from calm_rest.dto import MethodIntro, RouteIntro
from calm_rest.handlers import JSON_CONTENT_TYPE, ResourceHandler, json_response
from calm_rest.protocols import BulkDeleter, Creator, Deleter, Getter, Lister, Patcher, Replacer

logger = logging.getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[Response]]

OPTIONS_DESC = "Get available methods"

_intro_adapter = TypeAdapter(list[RouteIntro])


class Router:
    """Methods bound to one path template, plus sub paths.

    Routes are added to ``api_router`` as they are declared, so pass the
    application's own router (``app.router``) or include ``api_router``
    after mounting.

    Example:
        ```python
        router = Router(app.router, "/stuff")
        router.get("Get a list of objects", list_stuff)
        router.sub_path("/{id}").get("Get an object", get_stuff)
        ```
    """

    def __init__(self, api_router: APIRouter, path: str) -> None:
        """Initialize the router.

        Args:
            api_router: FastAPI router receiving the routes.
            path: Path template, e.g. "/stuff/{id}".
        """
        self._api_router = api_router
        self._path = path
        self._methods: dict[str, str] = {}
        self._children: list[Router] = []
        self.add_method("OPTIONS", OPTIONS_DESC, self._options)

    def sub_path(self, template: str) -> "Router":
        """Return a new Router for a path under this one."""
        child = Router(self._api_router, self._path + template)
        self._children.append(child)
        return child

    def add_method(self, method: str, description: str, endpoint: Endpoint) -> "Router":
        """Bind ``endpoint`` to ``method`` at this path."""
        method = method.upper()
        self._methods[method] = description
        self._api_router.add_api_route(
            self._path,
            endpoint,
            methods=[method],
            description=description,
            name=f"{method} {self._path}",
        )
        if method == "GET":
            # FastAPI routes never answer HEAD on their own. Allow lists GET only.
            self._api_router.add_api_route(
                self._path,
                endpoint,
                methods=["HEAD"],
                name=f"HEAD {self._path}",
                include_in_schema=False,
            )
        logger.debug("Mounted %s %s: %s", method, self._path, description)
        return self

    def get(self, description: str, endpoint: Endpoint) -> "Router":
        return self.add_method("GET", description, endpoint)

    def post(self, description: str, endpoint: Endpoint) -> "Router":
        return self.add_method("POST", description, endpoint)

    def put(self, description: str, endpoint: Endpoint) -> "Router":
        return self.add_method("PUT", description, endpoint)

    def patch(self, description: str, endpoint: Endpoint) -> "Router":
        return self.add_method("PATCH", description, endpoint)

    def delete(self, description: str, endpoint: Endpoint) -> "Router":
        return self.add_method("DELETE", description, endpoint)

    def self_intro(self) -> list[RouteIntro]:
        """Describe this router and every router under it, depth first."""
        intros = [
            RouteIntro(
                path=self._path,
                methods=[
                    MethodIntro(method=method, description=description)
                    for method, description in sorted(self._methods.items())
                ],
            )
        ]
        for child in self._children:
            intros.extend(child.self_intro())
        return intros

    async def self_intro_endpoint(self, request: Request) -> Response:
        """Serve ``self_intro()`` as indented JSON."""
        return json_response(_intro_adapter.dump_json(self.self_intro(), indent=2))

    async def _options(self, request: Request) -> Response:
        return Response(
            status_code=status.HTTP_200_OK,
            headers={"Allow": ",".join(sorted(self._methods))},
            media_type=JSON_CONTENT_TYPE,
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def methods(self) -> dict[str, str]:
        """Method to description mapping (copy)."""
        return dict(self._methods)


DEFAULT_DESCRIPTIONS = {
    "GetAll": "Get a list of objects",
    "Post": "Add an object",
    "DeleteAll": "Delete every object",
    "Get": "Get an object",
    "Put": "Replace an object",
    "Patch": "Patch an object",
    "Delete": "Delete an object",
}


def mount(
    router: Router,
    handler: ResourceHandler,
    descriptions: Mapping[str, str] | None = None,
) -> Router:
    """Bind a resource handler to the conventional REST paths.

    Routes are only registered for capabilities the model implements
    (description key in brackets):
    - Lister: GET {path} [GetAll]
    - Creator: POST {path} [Post]
    - BulkDeleter: DELETE {path}, only with allow_delete_all [DeleteAll]
    - Getter: GET {path}/{key} [Get]
    - Replacer: PUT {path}/{key} [Put]
    - Patcher: PATCH {path}/{key}, also needs Getter [Patch]
    - Deleter: DELETE {path}/{key} [Delete]

    ``{path}/_doc`` serves the self description of every route.

    Args:
        router: Router for the collection path
        handler: Handler serving the resource
        descriptions: Overrides for the default descriptions, by key above

    Returns:
        The router of the item path
    """
    service = handler.service
    spec = service.spec

    def describe(operation: str) -> str:
        if descriptions and operation in descriptions:
            return descriptions[operation]
        return DEFAULT_DESCRIPTIONS[operation]

    async def endpoint(request: Request) -> Response:
        return await handler.handle(request)

    logger.debug("Mounting resource %s at %s", spec.name, router.path)
    router.sub_path("/_doc").get("Document", router.self_intro_endpoint)
    item = router.sub_path(f"/{{{spec.primary_key}}}")

    if service.supports(Lister):
        router.get(describe("GetAll"), endpoint)
    if service.supports(Creator):
        router.post(describe("Post"), endpoint)
    if spec.allow_delete_all and service.supports(BulkDeleter):
        router.delete(describe("DeleteAll"), endpoint)
    if service.supports(Getter):
        item.get(describe("Get"), endpoint)
    if service.supports(Replacer):
        item.put(describe("Put"), endpoint)
    if service.supports(Getter) and service.supports(Patcher):
        item.patch(describe("Patch"), endpoint)
    if service.supports(Deleter):
        item.delete(describe("Delete"), endpoint)
    return item
