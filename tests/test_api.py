"""
Tests for the calm_rest API.
"""

from fastapi.testclient import TestClient

from calm_rest.api.app import Item, create_app
from calm_rest.config import Settings

from .conftest import CountingModel


def _app_client(items=None, stream=False, **settings_args) -> TestClient:
    settings = Settings(**{"cache_expiration": 0, **settings_args})
    return TestClient(create_app(settings=settings, model=CountingModel(items=items, stream=stream)))


def _items(*ids: str) -> list[Item]:
    return [Item(id=item_id, title=f"title {item_id}") for item_id in ids]


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "calm_rest API"
    assert data["endpoints"]["stuff"] == "/stuff"


def test_health_without_cache(client):
    """Test health check when caching is disabled."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache": "disabled"}


def test_health_with_cache(cached_client):
    """Test health check against a reachable cache."""
    response = cached_client.get("/health")
    assert response.status_code == 200
    assert response.json()["cache"] == "connected"


def test_stats(client):
    """Test stats endpoint."""
    response = client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["resource"] == "stuff"
    assert data["cache_enabled"] is False
    assert data["total_items"] == 0


def test_crud_scenario(client):
    """Test the full lifecycle of one item."""
    response = client.get("/stuff")
    assert response.status_code == 200
    assert response.json() == []

    response = client.post("/stuff", json={"id": "1", "title": "x"})
    assert response.status_code == 201
    assert response.json() == {"id": "1"}
    assert response.headers["location"] == "http://testserver/stuff/1"

    response = client.get("/stuff/1")
    assert response.status_code == 200
    assert response.json() == {"id": "1", "title": "x"}

    response = client.put("/stuff/1", json={"id": "1", "title": "y"})
    assert response.status_code == 200
    assert response.json() == {"message": "Success"}
    assert client.get("/stuff/1").json()["title"] == "y"

    response = client.delete("/stuff/1")
    assert response.status_code == 200

    response = client.get("/stuff/1")
    assert response.status_code == 404
    assert response.json() == {"statusCode": 404, "message": "Not Found"}

    response = client.delete("/stuff")
    assert response.status_code == 405
    assert response.json()["statusCode"] == 405


def test_post_conflict(client):
    """Test posting the same id twice."""
    assert client.post("/stuff", json={"id": "1"}).status_code == 201
    response = client.post("/stuff", json={"id": "1"})
    assert response.status_code == 409
    assert response.json() == {"statusCode": 409, "message": "Already exists"}


def test_post_without_id(client):
    """Test a body without an id is a type mismatch."""
    response = client.post("/stuff", json={"title": "anonymous"})
    assert response.status_code == 400


def test_put_unknown_item(client):
    """Test PUT never creates."""
    response = client.put("/stuff/7", json={"id": "7"})
    assert response.status_code == 404


def test_patch(client):
    """Test JSON Patch over HTTP."""
    client.post("/stuff", json={"id": "1", "title": "x"})
    response = client.patch(
        "/stuff/1",
        json=[
            {"op": "replace", "path": "/title", "value": "z"},
            {"op": "add", "path": "/year", "value": 1897},
        ],
    )
    assert response.status_code == 200
    assert client.get("/stuff/1").json() == {"id": "1", "title": "z", "year": 1897}

    response = client.patch("/stuff/1", json={"title": "not a patch"})
    assert response.status_code == 400

    response = client.patch("/stuff/1", json=[{"op": "replace", "path": "title", "value": "z"}])
    assert response.status_code == 400
    assert response.json()["statusCode"] == 400


def test_head(client):
    """Test HEAD is answered wherever GET is mounted."""
    client.post("/stuff", json={"id": "1", "title": "x"})
    assert client.head("/stuff").status_code == 200
    assert client.head("/stuff/1").status_code == 200
    assert client.head("/stuff/2").status_code == 404
    assert client.head("/stuff/_doc").status_code == 200


def test_options_allow(client):
    """Test OPTIONS lists the methods mounted at each path."""
    response = client.options("/stuff")
    assert response.status_code == 200
    assert response.headers["allow"] == "GET,OPTIONS,POST"

    response = client.options("/stuff/1")
    assert response.headers["allow"] == "DELETE,GET,OPTIONS,PATCH,PUT"


def test_doc(client):
    """Test the self description of the resource."""
    response = client.get("/stuff/_doc")
    assert response.status_code == 200
    routes = response.json()
    assert [route["path"] for route in routes] == ["/stuff", "/stuff/_doc", "/stuff/{id}"]
    methods = {m["method"]: m["description"] for m in routes[0]["methods"]}
    assert methods == {
        "GET": "Get a list of objects",
        "OPTIONS": "Get available methods",
        "POST": "Add an object",
    }


def test_unknown_path(client):
    """Test unknown paths get the JSON error body."""
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert response.json() == {"statusCode": 404, "message": "Not Found"}


def test_not_acceptable(client):
    """Test non-JSON Accept headers are refused."""
    response = client.get("/stuff", headers={"Accept": "text/html"})
    assert response.status_code == 406


def test_delete_all_enabled():
    """Test DELETE on the collection when the policy allows it."""
    client = _app_client(items=_items("1", "2"), allow_delete_all=True)
    assert client.options("/stuff").headers["allow"] == "DELETE,GET,OPTIONS,POST"

    response = client.delete("/stuff")
    assert response.status_code == 200
    assert client.get("/stuff").json() == []


def test_pagination():
    """Test id cursor paging of the collection."""
    client = _app_client(items=_items("1", "2", "3"), page_size=2)
    assert [item["id"] for item in client.get("/stuff").json()] == ["1", "2"]
    assert [item["id"] for item in client.get("/stuff?last=2").json()] == ["3"]
    assert [item["id"] for item in client.get("/stuff?limit=3").json()] == ["1", "2", "3"]
    assert client.get("/stuff?last=3").status_code == 404


def test_streamed_listing():
    """Test a streaming model serves the whole collection."""
    client = _app_client(items=_items("1", "2", "3"), stream=True)
    response = client.get("/stuff")
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == ["1", "2", "3"]


def test_cached_reads_and_invalidation(cached_client):
    """Test reads are served from cache until a write invalidates them."""
    model = cached_client.app.state.resource_service.model
    assert cached_client.get("/stuff/1").json()["title"] == "x"
    assert cached_client.get("/stuff").json() == [{"id": "1", "title": "x"}]

    # Change the model behind the service's back: cached responses stay stale.
    model.put({"id": "1"}, Item(id="1", title="behind"))
    assert cached_client.get("/stuff/1").json()["title"] == "x"
    assert model.calls["get"] == 1

    response = cached_client.put("/stuff/1", json={"id": "1", "title": "y"})
    assert response.status_code == 200
    assert cached_client.get("/stuff/1").json()["title"] == "y"
    assert cached_client.get("/stuff").json() == [{"id": "1", "title": "y"}]


def test_round_trip_bytes(cached_client):
    """Test GET -> PUT -> GET returns identical bytes."""
    original = cached_client.get("/stuff/1").content
    assert cached_client.put("/stuff/1", content=original).status_code == 200
    assert cached_client.get("/stuff/1").content == original


def test_stats_with_cache(cached_client):
    """Test stats report Redis entries."""
    cached_client.get("/stuff/1")
    data = cached_client.get("/stats").json()
    assert data["cache_enabled"] is True
    assert data["cache"]["total_entries"] == 1
