"""CloudWatch adapter implementing the catalog and metric data ports."""

import logging
from collections.abc import Sequence
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from cwmetrics.adapters.aws.clients import ClientFactory
from cwmetrics.core.errors import DiscoveryError, QueryError
from cwmetrics.core.models import (
    Dimension,
    Metric,
    QueryDescriptor,
    QueryResult,
    TimeWindow,
)

logger = logging.getLogger(__name__)

# GetMetricData accepts at most 500 queries per request.
MAX_QUERIES_PER_REQUEST = 500


def _to_metric_data_query(query: QueryDescriptor) -> dict[str, Any]:
    return {
        "Id": query.id,
        "MetricStat": {
            "Metric": {
                "Namespace": query.metric.namespace,
                "MetricName": query.metric.name,
                "Dimensions": [
                    {"Name": d.name, "Value": d.value} for d in query.metric.dimensions
                ],
            },
            "Period": query.period,
            "Stat": query.statistic,
        },
        "Label": query.label,
    }


def _to_metric(raw: dict[str, Any]) -> Metric:
    return Metric(
        namespace=raw["Namespace"],
        name=raw["MetricName"],
        dimensions=tuple(
            Dimension(name=d["Name"], value=d["Value"]) for d in raw.get("Dimensions", [])
        ),
    )


class CloudWatchAPI:
    """boto3-backed MetricCatalogPort and MetricDataPort.

    Args:
        clients: Factory providing per-region CloudWatch clients.
    """

    def __init__(self, clients: ClientFactory) -> None:
        self._clients = clients

    def list_metrics(self, namespace: str, region: str) -> list[Metric]:
        client = self._clients.client("cloudwatch", region)
        metrics: list[Metric] = []
        try:
            for page in client.get_paginator("list_metrics").paginate(Namespace=namespace):
                metrics.extend(_to_metric(raw) for raw in page.get("Metrics", []))
        except (BotoCoreError, ClientError) as err:
            raise DiscoveryError(
                f"failed to list metrics of {namespace} in {region}", cause=err
            ) from err
        logger.debug("Listed %d metrics of %s in %s", len(metrics), namespace, region)
        return metrics

    def get_metric_data(
        self,
        queries: Sequence[QueryDescriptor],
        region: str,
        window: TimeWindow,
    ) -> list[QueryResult]:
        """Fetch results in batches of MAX_QUERIES_PER_REQUEST queries.

        A failed batch is logged and left out of the results.

        Raises:
            QueryError: If every batch failed.
        """
        client = self._clients.client("cloudwatch", region)
        labels = {q.id: q.label for q in queries}
        timestamps: dict[str, list[Any]] = {}
        values: dict[str, list[float]] = {}
        fetched: list[QueryDescriptor] = []
        last_error: BotoCoreError | ClientError | None = None

        for offset in range(0, len(queries), MAX_QUERIES_PER_REQUEST):
            chunk = queries[offset : offset + MAX_QUERIES_PER_REQUEST]
            chunk_timestamps: dict[str, list[Any]] = {}
            chunk_values: dict[str, list[float]] = {}
            try:
                pages = client.get_paginator("get_metric_data").paginate(
                    MetricDataQueries=[_to_metric_data_query(q) for q in chunk],
                    StartTime=window.start,
                    EndTime=window.end,
                )
                for page in pages:
                    for raw in page.get("MetricDataResults", []):
                        query_id = raw["Id"]
                        labels.setdefault(query_id, raw.get("Label", ""))
                        chunk_timestamps.setdefault(query_id, []).extend(
                            raw.get("Timestamps", [])
                        )
                        chunk_values.setdefault(query_id, []).extend(raw.get("Values", []))
            except (BotoCoreError, ClientError) as err:
                logger.warning(
                    "Skipping %d metric data queries in region %s: %s",
                    len(chunk),
                    region,
                    err,
                    extra={"region": region},
                )
                last_error = err
                continue
            timestamps.update(chunk_timestamps)
            values.update(chunk_values)
            fetched.extend(chunk)

        if queries and not fetched:
            raise QueryError(
                f"failed to get metric data in {region}", cause=last_error
            ) from last_error

        return [
            QueryResult(
                id=query.id,
                label=labels[query.id],
                timestamps=tuple(timestamps.get(query.id, ())),
                values=tuple(values.get(query.id, ())),
            )
            for query in fetched
        ]
