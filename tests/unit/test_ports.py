"""Tests for port interfaces."""

from collections.abc import Iterable

import pytest
from tests.fakes import FakeCloudWatch, FakeMetadata, FakeTagging

from cwmetrics.core.models import Event, LogEntry
from cwmetrics.core.ports import (
    EventPublisherPort,
    LogStoragePort,
    MetadataPort,
    MetricCatalogPort,
    MetricDataPort,
    ResourceTagsPort,
)

pytestmark = [pytest.mark.core, pytest.mark.tier(0)]


class TestMetricPorts:
    """Tests for the CloudWatch-facing protocols."""

    def test_protocols_define_methods(self) -> None:
        """Each port defines its remote call."""
        assert hasattr(MetricCatalogPort, "list_metrics")
        assert hasattr(MetricDataPort, "get_metric_data")
        assert hasattr(ResourceTagsPort, "get_resource_tags")

    def test_fakes_satisfy_protocols(self) -> None:
        """The test fakes implement the ports they stand in for."""
        assert isinstance(FakeCloudWatch(), MetricCatalogPort)
        assert isinstance(FakeCloudWatch(), MetricDataPort)
        assert isinstance(FakeTagging(), ResourceTagsPort)
        assert isinstance(FakeMetadata(), MetadataPort)

    def test_object_without_methods_is_rejected(self) -> None:
        """Objects lacking the methods do not satisfy the ports."""
        assert not isinstance(object(), MetricCatalogPort)
        assert not isinstance(FakeTagging(), MetricDataPort)


class TestEventPublisherPort:
    def test_class_implementing_protocol_is_recognized(self) -> None:
        """A class with a publish method should satisfy EventPublisherPort."""

        class FakePublisher:
            def publish(self, event: Event) -> None:
                pass

        assert isinstance(FakePublisher(), EventPublisherPort)


class TestLogStoragePort:
    """Tests for LogStoragePort protocol."""

    def test_class_implementing_protocol_is_recognized(self) -> None:
        """A class with write and read methods should satisfy LogStoragePort."""

        class FakeLogStorage:
            def write(self, entry: LogEntry) -> None:
                pass

            def read(self, since: float = 0) -> Iterable[LogEntry]:
                return []

        storage: LogStoragePort = FakeLogStorage()
        assert isinstance(storage, LogStoragePort)

    def test_class_missing_read_is_rejected(self) -> None:
        """A write-only class does not satisfy LogStoragePort."""
        class WriteOnly:
            def write(self, entry: LogEntry) -> None:
                pass

        assert not isinstance(WriteOnly(), LogStoragePort)
