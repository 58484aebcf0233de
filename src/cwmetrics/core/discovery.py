"""Filtering of a discovered metric catalog against namespace specs."""

import logging
from collections.abc import Iterable, Sequence

from cwmetrics.core.models import Dimension, Metric, MetricRequest, NamespaceFilterSpec, Tag

logger = logging.getLogger(__name__)

DIMENSION_VALUE_WILDCARD = "*"


def contains_wildcard(dimensions: Iterable[Dimension]) -> bool:
    """Return True if any dimension value is the wildcard."""
    return any(d.value == DIMENSION_VALUE_WILDCARD for d in dimensions)


def compare_dimensions(
    discovered: Sequence[Dimension], configured: Sequence[Dimension]
) -> bool:
    """Compare discovered dimensions with configured dimension patterns.

    Both sets must have the same size and the same name -> value mapping. A
    wildcard value in either set matches any value of the same dimension name
    in the other.
    """
    if len(discovered) != len(configured):
        return False

    left = {d.name: d.value for d in discovered}
    right = {d.name: d.value for d in configured}
    for name, value in left.items():
        if right.get(name) == DIMENSION_VALUE_WILDCARD:
            right[name] = value
    for name, value in right.items():
        if left.get(name) == DIMENSION_VALUE_WILDCARD:
            left[name] = value
    return left == right


def _accepts(metric: Metric, spec: NamespaceFilterSpec) -> bool:
    if spec.names is not None and metric.name not in spec.names:
        return False
    if spec.dimensions is not None and not compare_dimensions(
        metric.dimensions, spec.dimensions
    ):
        return False
    return True


def filter_metrics(
    catalog: Iterable[Metric], specs: Sequence[NamespaceFilterSpec]
) -> list[MetricRequest]:
    """Keep the catalog metrics accepted by each spec.

    Every metric is checked against every spec. A metric accepted by several
    specs yields one request per spec, each with that spec's statistics.
    """
    requests: list[MetricRequest] = []
    for metric in catalog:
        for spec in specs:
            if _accepts(metric, spec):
                requests.append(MetricRequest(metric, spec.statistics))
    logger.debug("Filtered catalog down to %d metric requests", len(requests))
    return requests


def construct_tag_filters(
    specs: Iterable[NamespaceFilterSpec],
) -> dict[str, tuple[Tag, ...]]:
    """Collect tag filters per resource type from namespace specs."""
    filters: dict[str, tuple[Tag, ...]] = {}
    for spec in specs:
        if not spec.resource_type:
            continue
        filters[spec.resource_type] = filters.get(spec.resource_type, ()) + spec.tags_filter
    return filters
