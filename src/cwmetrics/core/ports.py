"""Port interfaces for remote APIs and output adapters.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol, runtime_checkable

from cwmetrics.core.models import (
    Event,
    LogEntry,
    Metric,
    QueryDescriptor,
    QueryResult,
    ResourceTags,
    TimeWindow,
)


@runtime_checkable
class MetricCatalogPort(Protocol):
    """Port for listing the metrics available in a namespace.

    Examples: CloudWatchAPI.
    """

    def list_metrics(self, namespace: str, region: str) -> list[Metric]:
        """List every metric of a namespace in a region.

        Raises:
            DiscoveryError: If the catalog could not be listed.
        """
        ...


@runtime_checkable
class MetricDataPort(Protocol):
    """Port for fetching time series for a batch of queries.

    Examples: CloudWatchAPI.
    """

    def get_metric_data(
        self,
        queries: Sequence[QueryDescriptor],
        region: str,
        window: TimeWindow,
    ) -> list[QueryResult]:
        """Fetch one result per query.

        Results may be empty when no data exists in the window. Queries of a
        batch that failed are left out of the results.

        Raises:
            QueryError: If no data could be fetched at all.
        """
        ...


@runtime_checkable
class ResourceTagsPort(Protocol):
    """Port for looking up the tags of all resources of one type.

    Examples: ResourceGroupsTaggingAPI.
    """

    def get_resource_tags(self, resource_type: str, region: str) -> ResourceTags:
        """Return a mapping from resource identifier to its tags.

        Raises:
            TagLookupError: If the tags could not be fetched.
        """
        ...


@runtime_checkable
class MetadataPort(Protocol):
    """Port for enriching the events of one namespace with resource metadata.

    Examples: EC2InstanceMetadata.
    """

    def add_metadata(self, region: str, events: Mapping[str, Event]) -> None:
        """Add metadata fields to the events of one pass, keyed by identity.

        Events without a matching resource are left untouched.

        Raises:
            MetadataError: If the metadata could not be fetched.
        """
        ...


@runtime_checkable
class EventPublisherPort(Protocol):
    """Port receiving assembled events, one event per call.

    Examples: InMemoryEventPublisher, RingBufferEventPublisher,
    StreamEventPublisher.
    """

    def publish(self, event: Event) -> None:
        """Publish a single event."""
        ...


@runtime_checkable
class LogStoragePort(Protocol):
    """Port for storing structured diagnostics.

    Examples: InMemoryLogStorage.
    """

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        ...

    def read(self, since: float = 0) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Args:
            since: Unix timestamp. Returns entries with timestamp > since.
                   Default 0 returns all entries.

        Returns:
            Iterable of LogEntry objects, ordered by timestamp ascending.
        """
        ...
