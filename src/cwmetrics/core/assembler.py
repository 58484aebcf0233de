"""Assembly of aligned metric values into per-resource events."""

from collections.abc import Sequence
from datetime import datetime

from cwmetrics.core.models import (
    DIMENSIONS_PREFIX,
    NAMESPACE_FIELD,
    AccountContext,
    Event,
    Label,
)
from cwmetrics.core.statistics import lookup_statistic

METRIC_NAME_IDX = 0
NAMESPACE_IDX = 1
STATISTIC_IDX = 2


def dedot(name: str) -> str:
    """Replace dots so a name can be used as a single field path segment."""
    return name.replace(".", "_")


def strip_namespace(namespace: str) -> str:
    """Convert a namespace into its root field name (AWS/EC2 -> ec2)."""
    return namespace.split("/")[-1].lower()


def generate_field_name(namespace: str, labels: Sequence[str]) -> str:
    """Build the field name of a metric value from decoded label fields.

    Example:
        generate_field_name("AWS/EC2", ["CPUUtilization", "AWS/EC2", "avg"])
        returns "aws.ec2.metrics.CPUUtilization.avg".
    """
    statistic, _ = lookup_statistic(labels[STATISTIC_IDX])
    return (
        f"aws.{strip_namespace(namespace)}.metrics."
        f"{dedot(labels[METRIC_NAME_IDX])}.{statistic}"
    )


def fallback_identity(region: str, account_id: str, namespace: str) -> str:
    """Identity of metrics without an identifying dimension."""
    return region + account_id + namespace


class EventAssembler:
    """Groups aligned metric values into one event per resource identity.

    Args:
        region: Region the values were collected from.
        account: Account the values belong to.
        timestamp: Alignment timestamp shared by every event.
    """

    def __init__(
        self, region: str, account: AccountContext, timestamp: datetime
    ) -> None:
        self.region = region
        self.account = account
        self.timestamp = timestamp
        self.events: dict[str, Event] = {}

    def identity_for(self, label: Label) -> str:
        """Return the identity a label's value belongs to."""
        identifier = label.identifier
        if identifier is None:
            return fallback_identity(self.region, self.account.account_id, label.namespace)
        return identifier

    def has(self, identity: str) -> bool:
        return identity in self.events

    def insert(self, label: Label, value: float) -> Event:
        """Insert a metric value, creating the event on first reference."""
        identity = self.identity_for(label)
        event = self.events.get(identity)
        if event is None:
            event = Event(
                identity=identity,
                timestamp=self.timestamp,
                region=self.region,
                account=self.account,
            )
            self.events[identity] = event

        event.put(generate_field_name(label.namespace, label.fields), value)
        event.put(NAMESPACE_FIELD, label.namespace)
        for name, dim_value in zip(label.dimension_names, label.dimension_values):
            event.put(DIMENSIONS_PREFIX + name, dim_value)
        return event
