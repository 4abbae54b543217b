"""Demo application serving one in-memory resource at ``/stuff``.

Run it with ``python -m calm_rest.api.app``. Set ``CACHE_EXPIRATION``
to a positive number of seconds to cache responses in Redis.
"""

from typing import Any

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from calm_rest.api.dependencies import CacheDep, ServiceDep, lifespan
from calm_rest.api.errors import install_error_handlers
from calm_rest.api.router import Router, mount
from calm_rest.config import Settings, settings as default_settings
from calm_rest.errors import HTTPError
from calm_rest.handlers import ResourceHandler
from calm_rest.protocols import CacheStore
from calm_rest.repositories import InMemoryModel, RedisCacheRepository
from calm_rest.services import ResourceService

VERSION = "0.1.0"


class Item(BaseModel):
    """Any JSON object with a string id."""

    model_config = ConfigDict(extra="allow")

    id: str


def create_app(
    settings: Settings | None = None,
    model: object | None = None,
    cache: CacheStore | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use. If None, uses the global settings.
        model: Model behind ``/stuff``. If None, an empty InMemoryModel.
        cache: Response cache. If None and caching is enabled, Redis.

    Returns:
        The FastAPI application
    """
    settings = settings or default_settings
    if cache is None and settings.cache_enabled:
        cache = RedisCacheRepository.create(settings)
    if model is None:
        model = InMemoryModel(id_field="id", key=settings.primary_key)

    service = ResourceService.create(
        name="stuff",
        data_type=Item,
        model=model,
        cache=cache,
        settings=settings,
    )
    handler = ResourceHandler(service=service)

    app = FastAPI(
        title="calm_rest API",
        description="Cached REST resources over pluggable models",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cache = cache
    app.state.resource_service = service

    install_error_handlers(app)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "calm_rest API",
            "version": VERSION,
            "endpoints": {
                "stuff": "/stuff",
                "doc": "/stuff/_doc",
                "health": "/health",
                "stats": "/stats",
            },
        }

    @app.get("/health")
    async def health(cache: CacheDep) -> dict[str, Any]:
        """Health check endpoint."""
        if cache is None:
            return {"status": "healthy", "cache": "disabled"}
        if isinstance(cache, RedisCacheRepository) and not cache.health_check():
            raise HTTPError("Cache connection failed", status.HTTP_503_SERVICE_UNAVAILABLE)
        return {"status": "healthy", "cache": "connected"}

    @app.get("/stats")
    async def stats(service: ServiceDep) -> dict[str, Any]:
        """Resource and cache statistics."""
        result: dict[str, Any] = {
            "resource": service.spec.name,
            "cache_enabled": service.cache_enabled,
            "expiration": service.spec.expiration,
        }
        if isinstance(service.cache, RedisCacheRepository):
            result["cache"] = service.cache.get_stats()
        if isinstance(service.model, InMemoryModel):
            result["total_items"] = len(service.model)
        return result

    stuff = Router(app.router, "/stuff")
    mount(stuff, handler)
    app.state.router = stuff

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "calm_rest.api.app:app",
        host=default_settings.api_host,
        port=default_settings.api_port,
        reload=default_settings.api_reload,
    )
