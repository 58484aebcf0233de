"""In-memory event publisher."""

from collections.abc import Iterable

from cwmetrics.core.models import Event


class InMemoryEventPublisher:
    """In-memory implementation of EventPublisherPort.

    Stores published events in a list. Suitable for testing and
    one-shot invocations whose events are consumed by the caller.
    """

    def __init__(self) -> None:
        self._events: list[Event] = []

    def publish(self, event: Event) -> None:
        """Publish a single event."""
        self._events.append(event)

    def read(self) -> Iterable[Event]:
        """Read events in publication order."""
        yield from self._events

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
