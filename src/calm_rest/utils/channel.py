"""Single-slot channel between a producer thread and a consumer."""

import queue
import threading
from collections.abc import Iterator
from typing import Any

_CLOSED = object()


class ChannelClosedError(RuntimeError):
    """Raised when sending on a closed channel."""


class ItemChannel:
    """A blocking channel holding at most one item in flight.

    ``send`` blocks until the consumer has taken the previous item, so a
    producer stays in step with the consumer. Iterating yields items until
    ``close`` is called; the channel can be iterated to the end only once.

    Example:
        ```python
        channel = ItemChannel()

        def produce():
            for item in rows:
                channel.send(item)
            channel.close()

        threading.Thread(target=produce).start()
        for item in channel:
            ...
        ```
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=1)
        self._lock = threading.Lock()
        self._closed = False
        self._exhausted = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, item: Any) -> None:
        """Hand one item to the consumer, blocking until there is room."""
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        self._queue.put(item)

    def close(self) -> None:
        """Signal that no more items will be sent. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[Any]:
        while not self._exhausted:
            item = self._queue.get()
            if item is _CLOSED:
                self._exhausted = True
                return
            yield item
