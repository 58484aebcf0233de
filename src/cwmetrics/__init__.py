"""cwmetrics - CloudWatch metrics collected into per-resource events."""

from cwmetrics.adapters.aws import default_registry
from cwmetrics.adapters.logging import DiagnosticsHandler
from cwmetrics.adapters.publishers import (
    InMemoryEventPublisher,
    RingBufferEventPublisher,
    StreamEventPublisher,
)
from cwmetrics.adapters.storage import InMemoryLogStorage
from cwmetrics.core.collector import CloudWatchCollector
from cwmetrics.core.config import CollectorConfig, MetricConfig, resolve_config
from cwmetrics.core.errors import (
    CollectorError,
    ConfigurationError,
    DiscoveryError,
    ErrorKind,
    MalformedLabelError,
    MetadataError,
    QueryError,
    TagLookupError,
)
from cwmetrics.core.models import (
    AccountContext,
    Dimension,
    Event,
    Label,
    LogEntry,
    Metric,
    MetricRequest,
    NamespaceFilterSpec,
    QueryDescriptor,
    QueryResult,
    Tag,
    TimeWindow,
)
from cwmetrics.core.ports import (
    EventPublisherPort,
    LogStoragePort,
    MetadataPort,
    MetricCatalogPort,
    MetricDataPort,
    ResourceTagsPort,
)
from cwmetrics.core.registry import CollectorRegistry
from cwmetrics.core.statistics import lookup_statistic

__all__ = [
    # Models
    "AccountContext",
    "Dimension",
    "Event",
    "Label",
    "LogEntry",
    "Metric",
    "MetricRequest",
    "NamespaceFilterSpec",
    "QueryDescriptor",
    "QueryResult",
    "Tag",
    "TimeWindow",
    # Configuration
    "CollectorConfig",
    "MetricConfig",
    "resolve_config",
    "lookup_statistic",
    # Errors
    "CollectorError",
    "ConfigurationError",
    "DiscoveryError",
    "ErrorKind",
    "MalformedLabelError",
    "MetadataError",
    "QueryError",
    "TagLookupError",
    # Ports
    "EventPublisherPort",
    "LogStoragePort",
    "MetadataPort",
    "MetricCatalogPort",
    "MetricDataPort",
    "ResourceTagsPort",
    # Collector
    "CloudWatchCollector",
    "CollectorRegistry",
    "default_registry",
    # Adapters
    "DiagnosticsHandler",
    "InMemoryEventPublisher",
    "InMemoryLogStorage",
    "RingBufferEventPublisher",
    "StreamEventPublisher",
]
