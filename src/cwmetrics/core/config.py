"""Collector configuration and its resolution into metric requests.

Configuration arrives as an already-parsed mapping (e.g. loaded from YAML by
the caller). Each metrics entry is routed to one of two modes:

- exact mode: metric names and dimensions are given and no dimension value is
  the "*" wildcard. The metrics are queried directly.
- discovery mode: everything else. The namespace catalog is listed and
  filtered against the entry before querying.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from cwmetrics.core.discovery import contains_wildcard
from cwmetrics.core.errors import ConfigurationError
from cwmetrics.core.models import Dimension, Metric, MetricRequest, NamespaceFilterSpec, Tag
from cwmetrics.core.statistics import DEFAULT_STATISTICS, check_statistics

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = 300
DEFAULT_LATENCY = 0

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(s|m|h)?\s*$")
_DURATION_UNITS = {None: 1, "s": 1, "m": 60, "h": 3600}


@dataclass(frozen=True)
class MetricConfig:
    """One entry of the metrics configuration.

    Attributes:
        namespace: CloudWatch namespace (required).
        names: Metric names, None when not configured.
        dimensions: Dimensions, None when not configured.
        resource_type: Resource type for tag lookups (e.g., "ec2:instance").
        statistics: Statistics, None to use DEFAULT_STATISTICS.
    """

    namespace: str
    names: tuple[str, ...] | None = None
    dimensions: tuple[Dimension, ...] | None = None
    resource_type: str = ""
    statistics: tuple[str, ...] | None = None


@dataclass(frozen=True)
class CollectorConfig:
    """Complete collector configuration.

    Attributes:
        metrics: Metric entries to collect.
        regions: Regions to collect from.
        period: Collection period in whole seconds.
        latency: Delay applied to the end of the query window, in seconds.
        tags_filter: Tags a resource must carry to be reported.
        fips_enabled: Use FIPS endpoints for AWS clients.
    """

    metrics: tuple[MetricConfig, ...]
    regions: tuple[str, ...] = ()
    period: int = DEFAULT_PERIOD
    latency: int = DEFAULT_LATENCY
    tags_filter: tuple[Tag, ...] = ()
    fips_enabled: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CollectorConfig":
        """Build and validate a configuration from a parsed mapping.

        Raises:
            ConfigurationError: If the mapping is not a valid configuration.
        """
        entries = raw.get("metrics")
        if not entries:
            raise ConfigurationError("metrics in config is missing")
        metrics = tuple(_parse_metric_config(entry) for entry in entries)
        regions = tuple(str(r) for r in _as_list(raw.get("regions")))
        if not regions:
            raise ConfigurationError("regions in config is missing")
        check_statistics(metrics)

        period = _parse_duration(raw.get("period", DEFAULT_PERIOD), "period")
        if period <= 0:
            raise ConfigurationError(f"period must be positive, got {period}")
        latency = _parse_duration(raw.get("latency", DEFAULT_LATENCY), "latency")
        if latency < 0:
            raise ConfigurationError(f"latency must not be negative, got {latency}")

        config = cls(
            metrics=metrics,
            regions=regions,
            period=period,
            latency=latency,
            tags_filter=tuple(_parse_tag(t) for t in _as_list(raw.get("tags_filter"))),
            fips_enabled=bool(raw.get("fips_enabled", False)),
        )
        logger.debug("cloudwatch config = %s", config)
        return config


@dataclass
class ResolvedConfig:
    """Configuration split into exact requests and discovery specs.

    Attributes:
        metric_requests: Exact-mode requests.
        resource_type_filters: Tag filters per resource type for exact mode.
        namespace_specs: Discovery specs per namespace, never merged.
    """

    metric_requests: list[MetricRequest] = field(default_factory=list)
    resource_type_filters: dict[str, tuple[Tag, ...]] = field(default_factory=dict)
    namespace_specs: dict[str, list[NamespaceFilterSpec]] = field(default_factory=dict)


def resolve_config(config: CollectorConfig) -> ResolvedConfig:
    """Partition configured metrics into exact requests and discovery specs."""
    resolved = ResolvedConfig()
    for entry in config.metrics:
        statistics = entry.statistics or DEFAULT_STATISTICS

        if entry.names and entry.dimensions and not contains_wildcard(entry.dimensions):
            for name in entry.names:
                metric = Metric(
                    namespace=entry.namespace, name=name, dimensions=entry.dimensions
                )
                resolved.metric_requests.append(MetricRequest(metric, statistics))
            if entry.resource_type:
                resolved.resource_type_filters[entry.resource_type] = config.tags_filter
            continue

        spec = NamespaceFilterSpec(
            namespace=entry.namespace,
            names=entry.names or None,
            dimensions=entry.dimensions or None,
            tags_filter=config.tags_filter,
            resource_type=entry.resource_type,
            statistics=statistics,
        )
        resolved.namespace_specs.setdefault(entry.namespace, []).append(spec)
    return resolved


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, Mapping)):
        return [value]
    if isinstance(value, Sequence):
        return list(value)
    raise ConfigurationError(f"expected a list, got {type(value).__name__}")


def _parse_metric_config(entry: Mapping[str, Any]) -> MetricConfig:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"metrics entry must be a mapping, got {entry!r}")
    namespace = entry.get("namespace")
    if not namespace:
        raise ConfigurationError(f"namespace is required in metrics entry {dict(entry)}")

    names = tuple(str(n) for n in _as_list(entry.get("name")))
    dimensions = tuple(_parse_dimension(d) for d in _as_list(entry.get("dimensions")))
    statistics = tuple(str(s) for s in _as_list(entry.get("statistic")))
    return MetricConfig(
        namespace=str(namespace),
        names=names or None,
        dimensions=dimensions or None,
        resource_type=str(entry.get("resource_type") or ""),
        statistics=statistics or None,
    )


def _parse_dimension(raw: Mapping[str, Any]) -> Dimension:
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"dimension must be a mapping, got {raw!r}")
    name, value = raw.get("name"), raw.get("value")
    if not name or not value:
        raise ConfigurationError(f"dimension requires a name and a value, got {dict(raw)}")
    return Dimension(name=str(name), value=str(value))


def _parse_tag(raw: Mapping[str, Any]) -> Tag:
    if not isinstance(raw, Mapping) or not raw.get("key"):
        raise ConfigurationError(f"tags_filter entry requires a key, got {raw!r}")
    return Tag(key=str(raw["key"]), value=str(raw.get("value", "")))


def _parse_duration(value: Any, name: str) -> int:
    """Parse seconds given as a number or a string such as "5m" or "300s"."""
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a duration, got {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    match = _DURATION_RE.match(str(value))
    if match is None:
        raise ConfigurationError(f"{name} must be a duration, got {value!r}")
    amount, unit = match.groups()
    return int(float(amount) * _DURATION_UNITS[unit])
