"""Collection results returned by ``Lister.get_all``."""

import threading
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from calm_rest.utils.channel import ItemChannel


@dataclass(frozen=True)
class Materialized:
    """Every item of the collection, already in memory.

    Attributes:
        items: The items, serialized in order
    """

    items: Sequence[Any]


@dataclass(frozen=True)
class Streamed:
    """Items produced one at a time.

    The source is consumed exactly once. Any item that is an exception
    aborts serialization of the whole collection, but the source is still
    read to the end so a producer thread never stays blocked.

    Attributes:
        source: Single-pass iterable of items or exceptions
        producer: Thread feeding ``source``, if any
    """

    source: Iterable[Any]
    producer: threading.Thread | None = None

    @classmethod
    def from_producer(
        cls,
        produce: Callable[[ItemChannel], None],
        name: str | None = None,
    ) -> "Streamed":
        """Run ``produce`` in a background thread feeding a fresh channel.

        The channel is closed when ``produce`` returns. If it raises, the
        exception is sent as the last item, so the consumer fails with it.

        Args:
            produce: Callable that sends items on the channel it receives
            name: Optional thread name

        Returns:
            A Streamed collection reading from the channel
        """
        channel = ItemChannel()

        def run() -> None:
            try:
                produce(channel)
            except Exception as e:
                channel.send(e)
            finally:
                channel.close()

        thread = threading.Thread(target=run, name=name, daemon=True)
        thread.start()
        return cls(source=channel, producer=thread)


Collection = Materialized | Streamed
