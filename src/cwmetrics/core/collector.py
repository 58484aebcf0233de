"""CloudWatch collector: one invocation over every configured region.

Each region runs an exact-mode pass over the directly configured metrics and
one discovery pass per namespace. A pass builds a query batch, fetches the
data, aligns the results on a single timestamp and assembles events,
optionally gated and enriched by resource tags. Discovery passes of namespaces
with a registered metadata provider are enriched with resource metadata.
Remote failures skip the affected pass and never abort the invocation.
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

from cwmetrics.core.assembler import EventAssembler
from cwmetrics.core.config import CollectorConfig, resolve_config
from cwmetrics.core.correlation import aligned_values, find_timestamp
from cwmetrics.core.discovery import construct_tag_filters, filter_metrics
from cwmetrics.core.errors import (
    DiscoveryError,
    MetadataError,
    QueryError,
    TagLookupError,
)
from cwmetrics.core.models import (
    AccountContext,
    Event,
    MetricRequest,
    ResourceTags,
    Tag,
    TimeWindow,
)
from cwmetrics.core.ports import (
    EventPublisherPort,
    MetricCatalogPort,
    MetadataPort,
    MetricDataPort,
    ResourceTagsPort,
)
from cwmetrics.core.queries import build_queries, time_window
from cwmetrics.core.statistics import check_statistics
from cwmetrics.core.tags import filter_resource_tags, insert_tags, lookup_tags

logger = logging.getLogger(__name__)


class CloudWatchCollector:
    """Collects CloudWatch metrics into per-resource events.

    Example:
        ```python
        collector = CloudWatchCollector(config, account, api, api, tagging)
        publisher = InMemoryEventPublisher()
        collector.fetch(publisher)
        ```
    """

    def __init__(
        self,
        config: CollectorConfig,
        account: AccountContext,
        catalog: MetricCatalogPort,
        metric_data: MetricDataPort,
        tagging: ResourceTagsPort,
        metadata: Mapping[str, MetadataPort] | None = None,
    ) -> None:
        self.config = config
        self.account = account
        self._catalog = catalog
        self._metric_data = metric_data
        self._tagging = tagging
        self._metadata = dict(metadata or {})

    def _prepare(self, now: datetime | None) -> TimeWindow:
        check_statistics(self.config.metrics)
        now = now or datetime.now(timezone.utc)
        window = time_window(now, self.config.period, self.config.latency)
        logger.debug("startTime = %s, endTime = %s", window.start, window.end)
        return window

    def collect(self, now: datetime | None = None) -> list[Event]:
        """Run one invocation over every region sequentially.

        Raises:
            ConfigurationError: If a configured statistic is invalid.
        """
        window = self._prepare(now)
        events: list[Event] = []
        for region in self.config.regions:
            events.extend(self.collect_region(region, window))
        return events

    def fetch(self, publisher: EventPublisherPort, now: datetime | None = None) -> int:
        """Collect and publish every event one at a time.

        Returns:
            Number of published events.
        """
        events = self.collect(now)
        for event in events:
            publisher.publish(event)
        return len(events)

    async def fetch_async(
        self, publisher: EventPublisherPort, now: datetime | None = None
    ) -> int:
        """Collect all regions concurrently on worker threads, then publish.

        Returns:
            Number of published events.
        """
        window = self._prepare(now)
        per_region = await asyncio.gather(
            *(
                asyncio.to_thread(self.collect_region, region, window)
                for region in self.config.regions
            )
        )
        count = 0
        for events in per_region:
            for event in events:
                publisher.publish(event)
                count += 1
        return count

    def collect_region(self, region: str, window: TimeWindow) -> list[Event]:
        """Run the exact-mode pass and every discovery pass for one region."""
        resolved = resolve_config(self.config)
        events: list[Event] = []

        if resolved.metric_requests:
            exact = self._create_events(
                resolved.metric_requests,
                resolved.resource_type_filters,
                region,
                window,
            )
            logger.debug("Collected %d exact-mode events in %s", len(exact), region)
            events.extend(exact.values())

        for namespace in sorted(resolved.namespace_specs):
            specs = resolved.namespace_specs[namespace]
            logger.debug("Collecting metrics from namespace %s in %s", namespace, region)
            try:
                catalog = self._catalog.list_metrics(namespace, region)
            except DiscoveryError as err:
                logger.info(
                    "Skipping namespace %s in region %s: %s",
                    namespace,
                    region,
                    err,
                    extra={"region": region, "namespace": namespace},
                )
                continue
            if not catalog:
                continue

            requests = filter_metrics(catalog, specs)
            discovered = self._create_events(
                requests, construct_tag_filters(specs), region, window
            )
            logger.debug(
                "Collected %d events from namespace %s in %s",
                len(discovered),
                namespace,
                region,
            )
            self._add_metadata(namespace, region, discovered)
            events.extend(discovered.values())
        return events

    def _add_metadata(self, namespace: str, region: str, events: dict[str, Event]) -> None:
        provider = self._metadata.get(namespace)
        if provider is None or not events:
            return
        try:
            provider.add_metadata(region, events)
        except MetadataError as err:
            logger.warning(
                "Could not add metadata to events of %s in region %s: %s",
                namespace,
                region,
                err,
                extra={"region": region, "namespace": namespace},
            )

    def _fetch_resource_tags(self, resource_type: str, region: str) -> ResourceTags:
        try:
            return self._tagging.get_resource_tags(resource_type, region)
        except TagLookupError as err:
            logger.info(
                "Reporting events without tags for %s in region %s: %s",
                resource_type,
                region,
                err,
                extra={"region": region, "resource_type": resource_type},
            )
            return {}

    def _create_events(
        self,
        requests: Sequence[MetricRequest],
        resource_type_filters: dict[str, tuple[Tag, ...]],
        region: str,
        window: TimeWindow,
    ) -> dict[str, Event]:
        queries = build_queries(requests, self.config.period)
        logger.debug("Number of MetricDataQueries = %d", len(queries))
        if not queries:
            return {}

        try:
            results = self._metric_data.get_metric_data(queries, region, window)
        except QueryError as err:
            logger.warning(
                "Skipping metric data in region %s: %s",
                region,
                err,
                extra={"region": region},
            )
            return {}
        logger.debug("Number of metricDataResults = %d", len(results))

        timestamp = find_timestamp(results)
        if timestamp is None:
            return {}
        values = aligned_values(results, timestamp)
        assembler = EventAssembler(region, self.account, timestamp)

        if not resource_type_filters:
            for label, value in values:
                assembler.insert(label, value)
            return assembler.events

        for resource_type in sorted(resource_type_filters):
            tags_filter = resource_type_filters[resource_type]
            logger.debug("resourceType = %s, tagsFilter = %s", resource_type, tags_filter)
            resource_tags = self._fetch_resource_tags(resource_type, region)
            if tags_filter and not resource_tags:
                continue
            resource_tags = filter_resource_tags(resource_tags, tags_filter, region)

            for label, value in values:
                identifier = label.identifier
                if identifier is None:
                    # Without an identifying dimension the filter cannot match.
                    if tags_filter:
                        continue
                    assembler.insert(label, value)
                    continue
                if (
                    tags_filter
                    and not assembler.has(identifier)
                    and not lookup_tags(identifier, resource_tags)
                ):
                    continue
                event = assembler.insert(label, value)
                insert_tags(event, identifier, resource_tags)
        return assembler.events
