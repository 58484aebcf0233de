"""boto3 adapters implementing the remote API ports."""

from cwmetrics.adapters.aws.clients import ClientFactory
from cwmetrics.adapters.aws.cloudwatch import CloudWatchAPI
from cwmetrics.adapters.aws.ec2 import EC2InstanceMetadata
from cwmetrics.adapters.aws.factory import create_cloudwatch_collector, default_registry
from cwmetrics.adapters.aws.tagging import ResourceGroupsTaggingAPI

__all__ = [
    "ClientFactory",
    "CloudWatchAPI",
    "EC2InstanceMetadata",
    "ResourceGroupsTaggingAPI",
    "create_cloudwatch_collector",
    "default_registry",
]
