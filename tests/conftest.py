"""
Shared fixtures and fakes for the calm_rest tests.
"""

from collections import Counter

import fakeredis
import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel

from calm_rest.api.app import Item, create_app
from calm_rest.config import Settings
from calm_rest.entities import ResourceSpec
from calm_rest.errors import CacheError
from calm_rest.repositories import InMemoryModel, RedisCacheRepository
from calm_rest.services import ResourceService


class Book(BaseModel):
    id: str
    title: str


class DictCache:
    """CacheStore keeping values in a dict and recording every call."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []

    def get(self, key: str) -> bytes | None:
        self.calls.append(("get", key))
        return self.data.get(key)

    def set(self, key: str, value: bytes, ttl: int) -> None:
        self.calls.append(("set", key))
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        self.data.pop(key, None)


class BrokenCache:
    """CacheStore whose backend is always unreachable."""

    def get(self, key: str) -> bytes | None:
        raise CacheError("unreachable")

    def set(self, key: str, value: bytes, ttl: int) -> None:
        raise CacheError("unreachable")

    def delete(self, key: str) -> None:
        raise CacheError("unreachable")


class CountingModel(InMemoryModel):
    """InMemoryModel counting calls per operation."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls: Counter[str] = Counter()

    def get(self, kvpairs):
        self.calls["get"] += 1
        return super().get(kvpairs)

    def get_all(self, kvpairs):
        self.calls["get_all"] += 1
        return super().get_all(kvpairs)

    def put(self, kvpairs, value):
        self.calls["put"] += 1
        return super().put(kvpairs, value)

    def patch(self, kvpairs, original, patched):
        self.calls["patch"] += 1
        return super().patch(kvpairs, original, patched)

    def post(self, kvpairs, value):
        self.calls["post"] += 1
        return super().post(kvpairs, value)

    def delete(self, kvpairs):
        self.calls["delete"] += 1
        return super().delete(kvpairs)

    def delete_all(self, kvpairs):
        self.calls["delete_all"] += 1
        return super().delete_all(kvpairs)


@pytest.fixture
def books():
    """Three books keyed by id."""
    return [
        Book(id="0", title="Peter"),
        Book(id="1", title="Paul"),
        Book(id="2", title="Mary"),
    ]


@pytest.fixture
def model(books):
    """A counting model holding the three books."""
    return CountingModel(items=books)


@pytest.fixture
def cache():
    """An in-process cache."""
    return DictCache()


@pytest.fixture
def service(model, cache):
    """A caching service over the book model."""
    spec = ResourceSpec(name="books", data_type=Book, expiration=60)
    return ResourceService(spec=spec, model=model, cache=cache)


@pytest.fixture
def fake_redis():
    """A fakeredis client with its own server."""
    return fakeredis.FakeRedis(server=fakeredis.FakeServer())


@pytest.fixture
def redis_cache(fake_redis):
    """A Redis cache repository over fakeredis."""
    return RedisCacheRepository(redis_client=fake_redis, prefix="test")


@pytest.fixture
def client():
    """Create a test client for an uncached app with an empty store."""
    return TestClient(create_app(settings=Settings(cache_expiration=0), model=CountingModel()))


@pytest.fixture
def cached_client(redis_cache):
    """Create a test client for an app caching in fakeredis."""
    app = create_app(
        settings=Settings(cache_expiration=60),
        model=CountingModel(items=[Item(id="1", title="x")]),
        cache=redis_cache,
    )
    return TestClient(app)
