"""
Tests for collection serialization and stream draining.
"""

import threading

import pytest

from calm_rest.entities import Materialized, Streamed
from calm_rest.services import encode_json, serialize_collection
from calm_rest.utils import ChannelClosedError, ItemChannel

from .conftest import Book


def test_encode_json_is_compact():
    """Test values are encoded without extra whitespace."""
    assert encode_json({"id": "1", "title": "x"}) == b'{"id":"1","title":"x"}'
    assert encode_json(Book(id="1", title="Ünïcode")) == '{"id":"1","title":"Ünïcode"}'.encode()


def test_materialized():
    """Test a materialized collection becomes a JSON array."""
    collection = Materialized([Book(id="1", title="a"), Book(id="2", title="b")])
    assert serialize_collection(collection) == b'[{"id":"1","title":"a"},{"id":"2","title":"b"}]'


def test_empty_collections():
    """Test empty sources give an empty array."""
    assert serialize_collection(Materialized([])) == b"[]"
    assert serialize_collection(Streamed(iter([]))) == b"[]"


def test_streamed_keeps_arrival_order():
    """Test streamed items are written in the order produced."""
    collection = Streamed(iter([{"n": 3}, {"n": 1}, {"n": 2}]))
    assert serialize_collection(collection) == b'[{"n":3},{"n":1},{"n":2}]'


def test_error_item_drains_source():
    """Test an error item is raised only after the source is exhausted."""
    consumed = []

    def source():
        for item in [{"n": 1}, {"n": 2}, ValueError("bad row"), {"n": 3}, {"n": 4}]:
            consumed.append(item)
            yield item

    with pytest.raises(ValueError, match="bad row"):
        serialize_collection(Streamed(source()))
    assert len(consumed) == 5


def test_first_error_wins():
    """Test the first error item is the one raised."""
    collection = Streamed(iter([KeyError("first"), RuntimeError("second")]))
    with pytest.raises(KeyError, match="first"):
        serialize_collection(collection)


def test_producer_finishes_after_error():
    """Test a producer thread sending past an error item is not left blocked."""
    sent = []

    def produce(channel):
        for n in range(3):
            channel.send({"n": n})
            sent.append(n)
        channel.send(RuntimeError("storage failure"))
        sent.append("error")
        for n in range(3, 6):
            channel.send({"n": n})
            sent.append(n)

    collection = Streamed.from_producer(produce)
    with pytest.raises(RuntimeError, match="storage failure"):
        serialize_collection(collection)

    collection.producer.join(timeout=2)
    assert not collection.producer.is_alive()
    assert sent == [0, 1, 2, "error", 3, 4, 5]


def test_producer_exception_becomes_error_item():
    """Test an exception raised by the producer fails the collection."""

    def produce(channel):
        channel.send({"n": 0})
        raise LookupError("lost connection")

    collection = Streamed.from_producer(produce)
    with pytest.raises(LookupError, match="lost connection"):
        serialize_collection(collection)
    collection.producer.join(timeout=2)
    assert not collection.producer.is_alive()


def test_producer_success():
    """Test a producer's items are all serialized."""

    def produce(channel):
        for n in range(3):
            channel.send({"n": n})

    collection = Streamed.from_producer(produce)
    assert serialize_collection(collection) == b'[{"n":0},{"n":1},{"n":2}]'
    collection.producer.join(timeout=2)
    assert not collection.producer.is_alive()


def test_channel_holds_one_item():
    """Test send blocks until the consumer takes the previous item."""
    channel = ItemChannel()
    channel.send(1)
    second_sent = threading.Event()

    def send_second():
        channel.send(2)
        second_sent.set()

    thread = threading.Thread(target=send_second, daemon=True)
    thread.start()
    assert not second_sent.wait(timeout=0.1)

    items = iter(channel)
    assert next(items) == 1
    assert second_sent.wait(timeout=2)
    assert next(items) == 2
    channel.close()
    assert list(items) == []


def test_channel_close():
    """Test closing twice is harmless and sending after close fails."""
    channel = ItemChannel()
    channel.close()
    channel.close()
    assert channel.closed
    assert list(channel) == []
    assert list(channel) == []
    with pytest.raises(ChannelClosedError):
        channel.send(1)
