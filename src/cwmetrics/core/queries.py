"""Construction of GetMetricData query batches and query windows."""

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from cwmetrics.core.models import Label, MetricRequest, QueryDescriptor, TimeWindow


def query_id(request_index: int, statistic_index: int) -> str:
    """Return the batch-unique id of a query."""
    return f"cw{request_index}stats{statistic_index}"


def build_queries(
    requests: Sequence[MetricRequest], period: int
) -> list[QueryDescriptor]:
    """Build one query per (metric, statistic) pair.

    Args:
        requests: Metric requests in a deterministic order.
        period: Query period in whole seconds.

    Returns:
        Query descriptors whose ids are unique within the batch.
    """
    queries: list[QueryDescriptor] = []
    for i, request in enumerate(requests):
        for j, statistic in enumerate(request.statistics):
            queries.append(
                QueryDescriptor(
                    id=query_id(i, j),
                    metric=request.metric,
                    statistic=statistic,
                    period=int(period),
                    label=Label.for_metric(request.metric, statistic).encode(),
                )
            )
    return queries


def time_window(
    now: datetime, period: int, latency: int = 0
) -> TimeWindow:
    """Compute the query window for an invocation.

    The end is ``now - latency`` truncated down to a multiple of the period,
    so successive invocations query adjacent, non-overlapping windows.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    shifted = int((now - timedelta(seconds=latency)).timestamp())
    end = datetime.fromtimestamp(shifted - shifted % period, tz=timezone.utc)
    return TimeWindow(start=end - timedelta(seconds=period), end=end)
