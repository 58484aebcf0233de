"""Tests for field naming and event assembly."""

import pytest

from cwmetrics.core.assembler import (
    EventAssembler,
    dedot,
    fallback_identity,
    generate_field_name,
    strip_namespace,
)
from cwmetrics.core.models import AccountContext, Label
from tests.fakes import T

pytestmark = [pytest.mark.core, pytest.mark.tier(0)]

ACCOUNT = AccountContext(account_id="111", account_name="test-account")


class TestFieldNames:
    """Tests for field name helpers."""

    def test_generate_field_name_with_canonical_statistic(self) -> None:
        """Canonical statistics are used as the last path segment."""
        assert (
            generate_field_name("AWS/EC2", ["CPUUtilization", "AWS/EC2", "avg"])
            == "aws.ec2.metrics.CPUUtilization.avg"
        )

    def test_generate_field_name_maps_statistic(self) -> None:
        """Remote statistic names map to their canonical form."""
        assert (
            generate_field_name("AWS/EC2", ["CPUUtilization", "AWS/EC2", "SampleCount"])
            == "aws.ec2.metrics.CPUUtilization.count"
        )

    def test_generate_field_name_dedots_metric_name(self) -> None:
        """Dots in metric names become underscores."""
        assert (
            generate_field_name("AWS/Kafka", ["Disk.Used.Percent", "AWS/Kafka", "p90"])
            == "aws.kafka.metrics.Disk_Used_Percent.p90"
        )

    def test_strip_namespace(self) -> None:
        """The namespace prefix is dropped and the rest lowercased."""
        assert strip_namespace("AWS/EC2") == "ec2"
        assert strip_namespace("ECS/ContainerInsights") == "containerinsights"
        assert strip_namespace("CustomNamespace") == "customnamespace"

    def test_dedot(self) -> None:
        assert dedot("a.b.c") == "a_b_c"

    def test_fallback_identity(self) -> None:
        """Fallback identity concatenates region, account and namespace."""
        assert fallback_identity("us-east-1", "111", "AWS/Billing") == "us-east-1111AWS/Billing"


class TestEventAssembler:
    """Tests for EventAssembler."""

    def test_insert_creates_seeded_event(self) -> None:
        """The first insert creates an event with metric, namespace and dimensions."""
        assembler = EventAssembler("us-east-1", ACCOUNT, T)

        event = assembler.insert(
            Label.decode("CPUUtilization|AWS/EC2|Average|InstanceId|i-1"), 12.5
        )

        assert event.identity == "i-1"
        assert event.region == "us-east-1"
        assert event.timestamp == T
        assert event.account == ACCOUNT
        assert event.fields == {
            "aws.ec2.metrics.CPUUtilization.avg": 12.5,
            "aws.cloudwatch.namespace": "AWS/EC2",
            "aws.dimensions.InstanceId": "i-1",
        }

    def test_values_of_one_identity_share_an_event(self) -> None:
        """Several statistics and metrics accumulate without overwriting."""
        assembler = EventAssembler("us-east-1", ACCOUNT, T)

        first = assembler.insert(Label.decode("CPUUtilization|AWS/EC2|Average|InstanceId|i-1"), 1.0)
        second = assembler.insert(Label.decode("CPUUtilization|AWS/EC2|Maximum|InstanceId|i-1"), 9.0)
        assembler.insert(Label.decode("NetworkIn|AWS/EC2|Sum|InstanceId|i-1"), 100.0)

        assert first is second
        assert list(assembler.events) == ["i-1"]
        assert first.metrics == {
            "aws.ec2.metrics.CPUUtilization.avg": 1.0,
            "aws.ec2.metrics.CPUUtilization.max": 9.0,
            "aws.ec2.metrics.NetworkIn.sum": 100.0,
        }

    def test_three_field_label_uses_fallback_identity(self) -> None:
        """Labels without dimensions group under the fallback identity."""
        assembler = EventAssembler("us-east-1", ACCOUNT, T)

        event = assembler.insert(Label.decode("EstimatedCharges|AWS/Billing|Maximum"), 42.0)

        assert event.identity == "us-east-1111AWS/Billing"
        assert event.dimensions == {}
        assert event.namespace == "AWS/Billing"
        assert event.fields["aws.billing.metrics.EstimatedCharges.max"] == 42.0

    def test_composite_identity_inserts_every_dimension(self) -> None:
        """Every dimension of a composite identity becomes a field."""
        assembler = EventAssembler("us-east-1", ACCOUNT, T)
        label = Label.decode(
            "BucketSizeBytes|AWS/S3|Average|StorageType,BucketName|StandardStorage,logs"
        )

        event = assembler.insert(label, 1024.0)

        assert event.identity == "StandardStorage,logs"
        assert event.dimensions == {"StorageType": "StandardStorage", "BucketName": "logs"}

    def test_distinct_identities_get_distinct_events(self) -> None:
        """Different identities never share an event."""
        assembler = EventAssembler("us-east-1", ACCOUNT, T)
        assembler.insert(Label.decode("CPUUtilization|AWS/EC2|Average|InstanceId|i-1"), 1.0)
        assembler.insert(Label.decode("CPUUtilization|AWS/EC2|Average|InstanceId|i-2"), 2.0)

        assert sorted(assembler.events) == ["i-1", "i-2"]
        assert assembler.has("i-2")
        assert not assembler.has("i-3")


class TestEvent:
    """Tests for Event field insertion and views."""

    def test_put_last_write_wins(self) -> None:
        """put() replaces an existing value by default."""
        event = EventAssembler("us-east-1", ACCOUNT, T).insert(
            Label.decode("CPUUtilization|AWS/EC2|Average|InstanceId|i-1"), 1.0
        )
        assert event.put("aws.ec2.metrics.CPUUtilization.avg", 2.0)
        assert event.fields["aws.ec2.metrics.CPUUtilization.avg"] == 2.0

    def test_put_without_overwrite_keeps_first_value(self) -> None:
        """put(overwrite=False) never replaces a value."""
        event = EventAssembler("us-east-1", ACCOUNT, T).insert(
            Label.decode("CPUUtilization|AWS/EC2|Average|InstanceId|i-1"), 1.0
        )
        assert event.put("aws.tags.env", "prod", overwrite=False)
        assert not event.put("aws.tags.env", "dev", overwrite=False)
        assert event.tags == {"env": "prod"}

    def test_to_dict_includes_cloud_metadata(self) -> None:
        """to_dict() adds timestamp, provider, region and account fields."""
        event = EventAssembler("us-east-1", ACCOUNT, T).insert(
            Label.decode("EstimatedCharges|AWS/Billing|Maximum"), 42.0
        )

        document = event.to_dict()

        assert document["@timestamp"] == "2024-03-01T12:00:00+00:00"
        assert document["cloud.provider"] == "aws"
        assert document["cloud.region"] == "us-east-1"
        assert document["cloud.account.id"] == "111"
        assert document["cloud.account.name"] == "test-account"
        assert document["aws.billing.metrics.EstimatedCharges.max"] == 42.0
