"""
Tests for cache key construction.
"""

from calm_rest.services import build_key


def test_key_ignores_parameter_order():
    """Test logically identical requests share a key."""
    first = build_key("stuff", {"id": "5", "lang": "en", "fields": "title"}, "id")
    second = build_key("stuff", {"fields": "title", "lang": "en", "id": "5"}, "id")
    assert first == second


def test_key_format():
    """Test keys name the resource and every parameter."""
    assert build_key("stuff", {"id": "5"}, "id") == "stuff/id=5"
    assert build_key("stuff", {"id": "5", "a": "b"}, "id") == "stuff/a=b&id=5"
    assert build_key("stuff", {"id": "5"}, "id", collection=True) == "stuff/"


def test_item_and_collection_keys_differ():
    """Test an item's key never equals the collection key."""
    item = build_key("stuff", {"id": "5"}, "id")
    collection = build_key("stuff", {}, "id", collection=True)
    assert item != collection


def test_collection_key_drops_primary_key():
    """Test every item maps to the same collection bucket."""
    keys = {build_key("stuff", {"id": str(i)}, "id", collection=True) for i in range(5)}
    assert keys == {build_key("stuff", {}, "id", collection=True)}


def test_missing_and_empty_primary_key_match():
    """Test an absent primary key and an empty one give the same key."""
    for collection in (False, True):
        assert build_key("stuff", {"id": ""}, "id", collection) == build_key("stuff", {}, "id", collection)


def test_collection_key_keeps_other_parameters():
    """Test non-key parameters still scope collection keys."""
    plain = build_key("stuff", {"id": "1"}, "id", collection=True)
    filtered = build_key("stuff", {"id": "1", "owner": "ann"}, "id", collection=True)
    assert plain != filtered


def test_separators_in_values_do_not_collide():
    """Test values containing separators are escaped."""
    smuggled = build_key("stuff", {"a": "1&b=2"}, "id")
    honest = build_key("stuff", {"a": "1", "b": "2"}, "id")
    assert smuggled != honest


def test_resources_are_namespaced():
    """Test identical parameters under different resources differ."""
    assert build_key("books", {"id": "1"}, "id") != build_key("stuff", {"id": "1"}, "id")


def test_custom_primary_key():
    """Test the primary key name is configurable."""
    assert build_key("stuff", {"key": "7", "id": "x"}, "key", collection=True) == "stuff/id=x"
