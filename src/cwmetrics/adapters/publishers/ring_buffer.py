"""Ring buffer event publisher.

Provides bounded in-memory storage that automatically evicts oldest
events when the buffer is full. Useful for long-running collectors that
need predictable memory usage.
"""

from collections import deque
from collections.abc import Iterable

from cwmetrics.core.models import Event


class RingBufferEventPublisher:
    """Ring buffer implementation of EventPublisherPort.

    Stores events in a fixed-size circular buffer. When the buffer
    is full, the oldest event is automatically evicted to make room for
    new events.

    Args:
        max_size: Maximum number of events to store.
    """

    def __init__(self, max_size: int) -> None:
        self._buffer: deque[Event] = deque(maxlen=max_size)

    def publish(self, event: Event) -> None:
        """Publish a single event."""
        self._buffer.append(event)

    def read(self) -> Iterable[Event]:
        """Read buffered events, oldest first."""
        yield from self._buffer

    def __len__(self) -> int:
        return len(self._buffer)
