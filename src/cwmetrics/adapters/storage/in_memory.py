"""In-memory storage adapter for diagnostics log entries."""

from collections.abc import Iterable

from cwmetrics.core.models import LogEntry


class InMemoryLogStorage:
    """In-memory implementation of LogStoragePort.

    Stores log entries in a list. Suitable for testing and
    low-volume applications where persistence is not required.
    """

    def __init__(self) -> None:
        self._entries: list[LogEntry] = []

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        self._entries.append(entry)

    def read(self, since: float = 0) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Returns entries with timestamp > since, ordered by timestamp ascending.
        """
        filtered = [e for e in self._entries if e.timestamp > since]
        yield from sorted(filtered, key=lambda e: e.timestamp)
