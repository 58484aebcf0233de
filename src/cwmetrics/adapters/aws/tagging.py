"""Resource Groups Tagging API adapter implementing the resource tags port."""

import logging

from botocore.exceptions import BotoCoreError, ClientError

from cwmetrics.adapters.aws.clients import ClientFactory
from cwmetrics.core.errors import TagLookupError
from cwmetrics.core.models import ResourceTags, Tag
from cwmetrics.core.tags import identifier_from_arn

logger = logging.getLogger(__name__)


class ResourceGroupsTaggingAPI:
    """boto3-backed ResourceTagsPort keyed by resource identifier.

    Args:
        clients: Factory providing per-region tagging clients.
    """

    def __init__(self, clients: ClientFactory) -> None:
        self._clients = clients

    def get_resource_tags(self, resource_type: str, region: str) -> ResourceTags:
        client = self._clients.client("resourcegroupstaggingapi", region)
        resource_tags: ResourceTags = {}
        try:
            pages = client.get_paginator("get_resources").paginate(
                ResourceTypeFilters=[resource_type]
            )
            for page in pages:
                for mapping in page.get("ResourceTagMappingList", []):
                    arn = mapping["ResourceARN"]
                    try:
                        identifier = identifier_from_arn(arn)
                    except ValueError:
                        logger.warning("Ignoring tags of unparsable ARN %s", arn)
                        continue
                    resource_tags[identifier] = tuple(
                        Tag(key=t["Key"], value=t["Value"]) for t in mapping.get("Tags", [])
                    )
        except (BotoCoreError, ClientError) as err:
            raise TagLookupError(
                f"failed to get resource tags of {resource_type} in {region}", cause=err
            ) from err
        logger.debug(
            "Fetched tags of %d %s resources in %s",
            len(resource_tags),
            resource_type,
            region,
        )
        return resource_tags
