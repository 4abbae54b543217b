#!/usr/bin/env python3
"""
Demo script for calm_rest.

This script walks through read-through caching and write invalidation
on an in-memory resource, with responses cached in Redis.
"""

import json
import time

from pydantic import BaseModel

from calm_rest import InMemoryModel, RedisCacheRepository, ResourceService, ResourceSpec
from calm_rest.errors import HTTPError


class Book(BaseModel):
    id: int
    title: str


BOOKS = [
    Book(id=1, title="The Mysterious Stranger"),
    Book(id=2, title="Life on the Mississippi"),
    Book(id=3, title="Roughing It"),
]


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def timed_read(label: str, read) -> bytes:
    start = time.time()
    payload = read()
    duration = (time.time() - start) * 1000
    print(f"  {label:<28} {duration:7.2f}ms  {payload.decode()[:60]}")
    return payload


def demo_read_through(service: ResourceService) -> None:
    """Demonstrate cache misses followed by hits."""
    print_section("Read-through caching")

    print("\n🔍 Reading the same item twice:")
    timed_read("GET /books/1 (miss)", lambda: service.read_single({"id": "1"}))
    timed_read("GET /books/1 (hit)", lambda: service.read_single({"id": "1"}))

    print("\n🔍 Reading the collection twice:")
    timed_read("GET /books (miss)", lambda: service.read_all({}))
    timed_read("GET /books (hit)", lambda: service.read_all({}))


def demo_invalidation(service: ResourceService) -> None:
    """Demonstrate invalidation on writes."""
    print_section("Write invalidation")

    print("\n📝 PUT /books/1")
    service.put({"id": "1"}, b'{"id": 1, "title": "A Connecticut Yankee"}')
    timed_read("GET /books/1 (fresh)", lambda: service.read_single({"id": "1"}))

    print("\n📝 PATCH /books/2")
    patch = [{"op": "replace", "path": "/title", "value": "Old Times on the Mississippi"}]
    service.patch({"id": "2"}, json.dumps(patch).encode())
    timed_read("GET /books (fresh)", lambda: service.read_all({}))

    print("\n📝 POST /books")
    item_id = service.post({}, b'{"id": 4, "title": "Following the Equator"}')
    print(f"  ✓ Created id {item_id}")
    timed_read("GET /books (fresh)", lambda: service.read_all({}))


def demo_errors(service: ResourceService) -> None:
    """Demonstrate client errors."""
    print_section("Errors")

    attempts = [
        ("GET /books/99", lambda: service.read_single({"id": "99"})),
        ("PUT /books/1 (bad body)", lambda: service.put({"id": "1"}, b'{"id": "one"}')),
        ("DELETE /books", lambda: service.delete_all({})),
    ]
    for label, attempt in attempts:
        try:
            attempt()
        except HTTPError as e:
            print(f"  {label:<28} ✗ {json.dumps(e.to_dict())}")


def main() -> None:
    """Run all demos."""
    print("\n🚀 calm_rest Demo")
    print("=" * 70)
    print("Cached REST resources over pluggable models")

    try:
        cache = RedisCacheRepository.create()
        spec = ResourceSpec(name="demo-books", data_type=Book, expiration=60)
        service = ResourceService(spec=spec, model=InMemoryModel(items=BOOKS), cache=cache)

        # Start from a clean slate
        service.invalidate({"id": "1"})
        service.invalidate({"id": "2"})

        demo_read_through(service)
        demo_invalidation(service)
        demo_errors(service)

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except Exception as e:
        print(f"\n❌ Error: {e}")
        print("\nMake sure Redis is running:")
        print("  redis-server --port 6379")
        print("\nOr set REDIS_URL to your Redis instance.")


if __name__ == "__main__":
    main()
