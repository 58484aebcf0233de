"""Wiring of a CloudWatchCollector backed by boto3 adapters."""

from collections.abc import Mapping
from typing import Any

import boto3

from cwmetrics.adapters.aws.clients import ClientFactory
from cwmetrics.adapters.aws.cloudwatch import CloudWatchAPI
from cwmetrics.adapters.aws.ec2 import EC2InstanceMetadata
from cwmetrics.adapters.aws.tagging import ResourceGroupsTaggingAPI
from cwmetrics.core.collector import CloudWatchCollector
from cwmetrics.core.config import CollectorConfig
from cwmetrics.core.models import AccountContext
from cwmetrics.core.registry import CollectorRegistry


def create_cloudwatch_collector(
    raw_config: Mapping[str, Any] | CollectorConfig,
    account: AccountContext,
    session: boto3.session.Session | None = None,
) -> CloudWatchCollector:
    """Create a collector from a parsed configuration mapping.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    if isinstance(raw_config, CollectorConfig):
        config = raw_config
    else:
        config = CollectorConfig.from_dict(raw_config)
    clients = ClientFactory(session=session, fips_enabled=config.fips_enabled)
    cloudwatch = CloudWatchAPI(clients)
    return CloudWatchCollector(
        config=config,
        account=account,
        catalog=cloudwatch,
        metric_data=cloudwatch,
        tagging=ResourceGroupsTaggingAPI(clients),
        metadata={"AWS/EC2": EC2InstanceMetadata(clients)},
    )


def default_registry() -> CollectorRegistry:
    """Return a registry with the built-in collectors registered."""
    registry = CollectorRegistry()
    registry.register("aws/cloudwatch", create_cloudwatch_collector)
    return registry
