"""Tag filtering and tag enrichment of assembled events."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cwmetrics.core.assembler import dedot
from cwmetrics.core.models import DIMENSION_SEPARATOR, TAGS_PREFIX, Event, ResourceTags, Tag

logger = logging.getLogger(__name__)

ARN_PREFIX = "arn:"


@dataclass(frozen=True)
class ARN:
    """Parsed Amazon Resource Name."""

    partition: str
    service: str
    region: str
    account_id: str
    resource: str


def parse_arn(arn: str) -> ARN:
    """Parse an ARN of the form arn:partition:service:region:account:resource.

    Raises:
        ValueError: If the string is not an ARN.
    """
    parts = arn.split(":", 5)
    if len(parts) != 6 or parts[0] != "arn" or not parts[5]:
        raise ValueError(f"invalid ARN: {arn!r}")
    return ARN(
        partition=parts[1],
        service=parts[2],
        region=parts[3],
        account_id=parts[4],
        resource=parts[5],
    )


def identifier_from_arn(arn: str) -> str:
    """Derive the resource identifier matching CloudWatch dimension values.

    The resource type prefix is dropped: "instance/i-123" -> "i-123",
    "loadbalancer/app/lb/50dc" -> "app/lb/50dc", "function:fn" -> "fn".
    Resources without a type prefix (S3 buckets, SQS queues) are returned as is.
    """
    resource = parse_arn(arn).resource
    for separator in ("/", ":"):
        if separator in resource:
            return resource.split(separator, 1)[1]
    return resource


def short_identifier_from_arn(arn: str) -> str:
    """Return the last path segment of an ARN's resource."""
    resource = parse_arn(arn).resource
    return resource.split("/")[-1].split(":")[-1]


def tags_match_filter(tags_filter: Iterable[Tag], tags: Iterable[Tag]) -> bool:
    """Return True if every filter tag is present with the same value."""
    present = {(t.key, t.value) for t in tags}
    return all((f.key, f.value) in present for f in tags_filter)


def filter_resource_tags(
    resource_tags: ResourceTags, tags_filter: Sequence[Tag], region: str = ""
) -> ResourceTags:
    """Drop resources whose tags do not satisfy the filter."""
    kept: ResourceTags = {}
    for identifier, tags in resource_tags.items():
        if not tags_match_filter(tags_filter, tags):
            logger.debug(
                "In region %s, resource %s tags do not match tags_filter",
                region,
                identifier,
            )
            continue
        logger.debug("In region %s, resource %s tags match tags_filter", region, identifier)
        kept[identifier] = tags
    return kept


def lookup_tags(identifier: str, resource_tags: ResourceTags) -> list[Tag]:
    """Collect the tags of an event identity.

    Composite identities (e.g. "StandardStorage,my-bucket") are split and each
    sub-identifier looked up. ARN-shaped sub-identifiers without a direct entry
    fall back to their short identifier.
    """
    found: list[Tag] = []
    for sub_identifier in identifier.split(DIMENSION_SEPARATOR):
        tags = resource_tags.get(sub_identifier)
        if not tags and sub_identifier.startswith(ARN_PREFIX):
            try:
                tags = resource_tags.get(short_identifier_from_arn(sub_identifier))
            except ValueError:
                logger.debug("Cannot derive identifier from %s", sub_identifier)
        if tags:
            found.extend(tags)
    return found


def insert_tags(event: Event, identifier: str, resource_tags: ResourceTags) -> None:
    """Attach matching tags as aws.tags.<key> without overwriting existing ones."""
    for tag in lookup_tags(identifier, resource_tags):
        event.put(TAGS_PREFIX + dedot(tag.key), tag.value, overwrite=False)
