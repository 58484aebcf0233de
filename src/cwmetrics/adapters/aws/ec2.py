"""EC2 adapter adding instance metadata to AWS/EC2 events."""

import logging
from collections.abc import Mapping
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from cwmetrics.adapters.aws.clients import ClientFactory
from cwmetrics.core.errors import MetadataError
from cwmetrics.core.models import Event

logger = logging.getLogger(__name__)

INSTANCE_ID_DIMENSION = "InstanceId"

# DescribeInstances accepts at most 200 values per filter.
MAX_FILTER_VALUES = 200


def instance_fields(instance: Mapping[str, Any]) -> dict[str, float | str]:
    """Map a DescribeInstances entry to event fields."""
    fields: dict[str, float | str] = {
        "cloud.instance.id": instance["InstanceId"],
    }
    name = next(
        (t["Value"] for t in instance.get("Tags", []) if t.get("Key") == "Name"), None
    )
    optional = {
        "cloud.instance.name": name,
        "cloud.machine.type": instance.get("InstanceType"),
        "cloud.availability_zone": instance.get("Placement", {}).get("AvailabilityZone"),
        "aws.ec2.instance.image.id": instance.get("ImageId"),
        "aws.ec2.instance.state.name": instance.get("State", {}).get("Name"),
        "aws.ec2.instance.state.code": instance.get("State", {}).get("Code"),
        "aws.ec2.instance.monitoring.state": instance.get("Monitoring", {}).get("State"),
        "aws.ec2.instance.core.count": instance.get("CpuOptions", {}).get("CoreCount"),
        "aws.ec2.instance.threads_per_core": instance.get("CpuOptions", {}).get(
            "ThreadsPerCore"
        ),
        "aws.ec2.instance.public.ip": instance.get("PublicIpAddress"),
        "aws.ec2.instance.public.dns_name": instance.get("PublicDnsName"),
        "aws.ec2.instance.private.ip": instance.get("PrivateIpAddress"),
        "aws.ec2.instance.private.dns_name": instance.get("PrivateDnsName"),
    }
    fields.update({path: value for path, value in optional.items() if value not in (None, "")})
    return fields


class EC2InstanceMetadata:
    """boto3-backed MetadataPort for the AWS/EC2 namespace.

    Events are matched to instances by their InstanceId dimension.

    Args:
        clients: Factory providing per-region EC2 clients.
    """

    def __init__(self, clients: ClientFactory) -> None:
        self._clients = clients

    def add_metadata(self, region: str, events: Mapping[str, Event]) -> None:
        by_instance: dict[str, list[Event]] = {}
        for event in events.values():
            instance_id = event.dimensions.get(INSTANCE_ID_DIMENSION)
            if instance_id is not None:
                by_instance.setdefault(str(instance_id), []).append(event)
        if not by_instance:
            return

        client = self._clients.client("ec2", region)
        instance_ids = sorted(by_instance)
        matched = 0
        try:
            for offset in range(0, len(instance_ids), MAX_FILTER_VALUES):
                chunk = instance_ids[offset : offset + MAX_FILTER_VALUES]
                pages = client.get_paginator("describe_instances").paginate(
                    Filters=[{"Name": "instance-id", "Values": chunk}]
                )
                for page in pages:
                    for reservation in page.get("Reservations", []):
                        for instance in reservation.get("Instances", []):
                            fields = instance_fields(instance)
                            for event in by_instance.get(instance["InstanceId"], []):
                                for path, value in fields.items():
                                    event.put(path, value)
                                matched += 1
        except (BotoCoreError, ClientError) as err:
            raise MetadataError(
                f"failed to describe EC2 instances in {region}", cause=err
            ) from err
        logger.debug("Added instance metadata to %d events in %s", matched, region)
