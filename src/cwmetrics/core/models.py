"""Core domain models for CloudWatch metric collection."""

from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import unquote

from cwmetrics.core.errors import MalformedLabelError

LABEL_SEPARATOR = "|"
DIMENSION_SEPARATOR = ","

NAMESPACE_FIELD = "aws.cloudwatch.namespace"
DIMENSIONS_PREFIX = "aws.dimensions."
TAGS_PREFIX = "aws.tags."


def _escape(text: str) -> str:
    """Percent-escape characters that would split a label field."""
    return text.replace("%", "%25").replace("|", "%7C").replace(",", "%2C")


@dataclass(frozen=True)
class Dimension:
    """A named key/value attribute scoping a metric to one resource.

    Attributes:
        name: Dimension name (e.g., InstanceId).
        value: Dimension value, or "*" in configuration to match any value.
    """

    name: str
    value: str


@dataclass(frozen=True)
class Tag:
    """A resource tag, also used as a required tag in tag filters."""

    key: str
    value: str


@dataclass(frozen=True)
class Metric:
    """A CloudWatch metric: namespace, metric name and ordered dimensions.

    Attributes:
        namespace: Metric namespace (e.g., AWS/EC2).
        name: Metric name (e.g., CPUUtilization).
        dimensions: Dimensions in their original order.
    """

    namespace: str
    name: str
    dimensions: tuple[Dimension, ...] = ()


@dataclass(frozen=True)
class MetricRequest:
    """A metric together with the statistics to query for it."""

    metric: Metric
    statistics: tuple[str, ...]


@dataclass(frozen=True)
class NamespaceFilterSpec:
    """A discovery-mode request filtering the metric catalog of one namespace.

    Attributes:
        namespace: Namespace whose catalog is listed.
        names: Metric names to keep, None when not configured.
        dimensions: Dimension patterns to match, None when not configured.
        tags_filter: Required tags for resources of resource_type.
        resource_type: Resource type used for tag lookups, "" when unset.
        statistics: Statistics attached to every accepted metric.
    """

    namespace: str
    names: tuple[str, ...] | None
    dimensions: tuple[Dimension, ...] | None
    tags_filter: tuple[Tag, ...]
    resource_type: str
    statistics: tuple[str, ...]


@dataclass(frozen=True)
class QueryDescriptor:
    """One entry of a GetMetricData batch."""

    id: str
    metric: Metric
    statistic: str
    period: int
    label: str


@dataclass(frozen=True)
class QueryResult:
    """Time series returned for one QueryDescriptor.

    Attributes:
        id: Id of the originating query.
        label: Label of the originating query.
        timestamps: Sample timestamps, values[i] belongs to timestamps[i].
        values: Sample values.
    """

    id: str
    label: str
    timestamps: tuple[datetime, ...] = ()
    values: tuple[float, ...] = ()


@dataclass(frozen=True)
class Label:
    """Decoded form of a query label.

    A label is the only channel carrying identity back from GetMetricData:
    metricName|namespace|statistic, extended with |dimNames|dimValues when the
    metric has dimensions. Separators occurring inside a field are
    percent-escaped so every encoded label decodes back to the same fields.
    """

    metric_name: str
    namespace: str
    statistic: str
    dimension_names: tuple[str, ...] = ()
    dimension_values: tuple[str, ...] = ()

    @classmethod
    def for_metric(cls, metric: Metric, statistic: str) -> "Label":
        return cls(
            metric_name=metric.name,
            namespace=metric.namespace,
            statistic=statistic,
            dimension_names=tuple(d.name for d in metric.dimensions),
            dimension_values=tuple(d.value for d in metric.dimensions),
        )

    @classmethod
    def decode(cls, label: str) -> "Label":
        """Decode a label string produced by encode().

        Raises:
            MalformedLabelError: If the label does not have 3 or 5 fields,
                or its dimension names and values do not pair up.
        """
        parts = label.split(LABEL_SEPARATOR)
        if len(parts) == 3:
            return cls(
                metric_name=unquote(parts[0]),
                namespace=unquote(parts[1]),
                statistic=unquote(parts[2]),
            )
        if len(parts) == 5:
            names = tuple(unquote(n) for n in parts[3].split(DIMENSION_SEPARATOR))
            values = tuple(unquote(v) for v in parts[4].split(DIMENSION_SEPARATOR))
            if len(names) != len(values):
                raise MalformedLabelError(
                    f"label has {len(names)} dimension names but "
                    f"{len(values)} dimension values: {label!r}"
                )
            return cls(
                metric_name=unquote(parts[0]),
                namespace=unquote(parts[1]),
                statistic=unquote(parts[2]),
                dimension_names=names,
                dimension_values=values,
            )
        raise MalformedLabelError(
            f"label must have 3 or 5 fields, got {len(parts)}: {label!r}"
        )

    def encode(self) -> str:
        """Encode the label, percent-escaping separators inside fields."""
        fields = [_escape(self.metric_name), _escape(self.namespace), _escape(self.statistic)]
        if self.dimension_names and self.dimension_values:
            fields.append(DIMENSION_SEPARATOR.join(_escape(n) for n in self.dimension_names))
            fields.append(DIMENSION_SEPARATOR.join(_escape(v) for v in self.dimension_values))
        return LABEL_SEPARATOR.join(fields)

    @property
    def fields(self) -> list[str]:
        """Unescaped label fields in encoded order (3 or 5 entries)."""
        fields = [self.metric_name, self.namespace, self.statistic]
        if self.dimension_names and self.dimension_values:
            fields.append(DIMENSION_SEPARATOR.join(self.dimension_names))
            fields.append(DIMENSION_SEPARATOR.join(self.dimension_values))
        return fields

    @property
    def identifier(self) -> str | None:
        """Comma-joined dimension values, or None without dimensions."""
        if not self.dimension_values:
            return None
        return DIMENSION_SEPARATOR.join(self.dimension_values)


@dataclass(frozen=True)
class AccountContext:
    """Account the collector runs for."""

    account_id: str
    account_name: str = ""


@dataclass(frozen=True)
class TimeWindow:
    """Query window [start, end) passed to GetMetricData."""

    start: datetime
    end: datetime


# Resource identifier -> tags of that resource.
ResourceTags = dict[str, tuple[Tag, ...]]


@dataclass
class Event:
    """Per-resource event assembled during one invocation.

    Fields are stored as an ordered mapping of dotted paths to values, e.g.
    "aws.ec2.metrics.CPUUtilization.avg" -> 12.5 or "aws.tags.env" -> "prod".

    Attributes:
        identity: Resource identity grouping the values of this event.
        timestamp: Alignment timestamp shared by all events of the invocation.
        region: AWS region the values were collected from.
        account: Account the values belong to.
        fields: Ordered dotted-path fields.
    """

    identity: str
    timestamp: datetime
    region: str
    account: AccountContext
    fields: dict[str, float | str] = field(default_factory=dict)

    def put(self, path: str, value: float | str, overwrite: bool = True) -> bool:
        """Insert a field.

        Args:
            path: Dotted field path.
            value: Numeric or string value.
            overwrite: Replace an existing value (last write wins) when True.

        Returns:
            True if the value was written.
        """
        if not overwrite and path in self.fields:
            return False
        self.fields[path] = value
        return True

    def _with_prefix(self, prefix: str) -> dict[str, float | str]:
        return {
            path[len(prefix) :]: value
            for path, value in self.fields.items()
            if path.startswith(prefix)
        }

    @property
    def namespace(self) -> str | None:
        value = self.fields.get(NAMESPACE_FIELD)
        return str(value) if value is not None else None

    @property
    def metrics(self) -> dict[str, float]:
        """Metric value fields keyed by their full path."""
        return {
            path: float(value)
            for path, value in self.fields.items()
            if ".metrics." in path and path.startswith("aws.")
        }

    @property
    def dimensions(self) -> dict[str, float | str]:
        return self._with_prefix(DIMENSIONS_PREFIX)

    @property
    def tags(self) -> dict[str, float | str]:
        return self._with_prefix(TAGS_PREFIX)

    def to_dict(self) -> dict[str, float | str]:
        """Flatten the event into a single document."""
        return {
            "@timestamp": self.timestamp.isoformat(),
            "cloud.provider": "aws",
            "cloud.region": self.region,
            "cloud.account.id": self.account.account_id,
            "cloud.account.name": self.account.account_name,
            **self.fields,
        }


@dataclass(frozen=True)
class LogEntry:
    """A structured log entry.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Log level (e.g., INFO, ERROR, DEBUG).
        message: The log message.
        attributes: Additional structured fields.
    """

    timestamp: float
    level: str
    message: str
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)
