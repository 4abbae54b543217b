"""FastAPI dependencies and lifespan for the calm_rest app.

The settings, service and cache live on app.state.

Pattern:
    - create_app() builds them once, before the first request
    - Dependency functions read them back from request.app.state
    - Lifespan only configures logging and manages the cache connection
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from calm_rest.config import configure_logging
from calm_rest.protocols import CacheStore
from calm_rest.repositories import RedisCacheRepository
from calm_rest.services import ResourceService

logger = logging.getLogger(__name__)


def get_resource_service(request: Request) -> ResourceService:
    """Dependency injection for ResourceService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ResourceService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "resource_service", None)
    if service is None:
        raise RuntimeError("ResourceService not initialized. Check create_app().")
    return service


def get_cache(request: Request) -> CacheStore | None:
    """Dependency injection for the response cache (None when caching is off)."""
    return getattr(request.app.state, "cache", None)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Startup:
        Configures logging and checks the cache connection. An unreachable
        cache is only a warning: requests are then served uncached.

    Cleanup:
        Closes the Redis connection pool
    """
    settings = app.state.settings
    configure_logging(settings.log_level)

    logger.info("Starting calm_rest API...")
    logger.info("Cache expiration: %ss", settings.cache_expiration)

    cache = app.state.cache
    if isinstance(cache, RedisCacheRepository):
        if cache.health_check():
            logger.info("Redis connection successful: %s", settings.redis_url)
        else:
            logger.warning("Redis connection failed: %s, serving uncached", settings.redis_url)

    yield

    if isinstance(cache, RedisCacheRepository):
        cache.client.close()
    logger.info("Shutting down calm_rest API...")


# Type aliases for cleaner dependency injection
ServiceDep = Annotated[ResourceService, Depends(get_resource_service)]
CacheDep = Annotated[CacheStore | None, Depends(get_cache)]
