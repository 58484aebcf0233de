"""Error taxonomy for metric collection.

Configuration errors abort an invocation. Discovery, query, tag lookup and
metadata errors come from remote calls and only skip the affected namespace,
region, resource type or enrichment. Malformed labels point at an encoding bug and are logged
loudly without aborting the invocation.
"""

from enum import Enum


class ErrorKind(Enum):
    """Category of a CollectorError."""

    CONFIGURATION = "configuration"
    DISCOVERY = "discovery"
    QUERY = "query"
    TAG_LOOKUP = "tag_lookup"
    METADATA = "metadata"
    MALFORMED_LABEL = "malformed_label"


class CollectorError(Exception):
    """Base error carrying a kind, a message and an optional wrapped cause."""

    kind: ErrorKind

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def recoverable(self) -> bool:
        """True for errors that only skip part of an invocation."""
        return self.kind is not ErrorKind.CONFIGURATION

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class ConfigurationError(CollectorError):
    """Invalid collector configuration."""

    kind = ErrorKind.CONFIGURATION


class DiscoveryError(CollectorError):
    """Listing the metric catalog of a namespace failed."""

    kind = ErrorKind.DISCOVERY


class QueryError(CollectorError):
    """Fetching metric data failed."""

    kind = ErrorKind.QUERY


class TagLookupError(CollectorError):
    """Fetching resource tags failed."""

    kind = ErrorKind.TAG_LOOKUP


class MetadataError(CollectorError):
    """Fetching per-resource metadata failed."""

    kind = ErrorKind.METADATA


class MalformedLabelError(CollectorError):
    """A query label could not be decoded."""

    kind = ErrorKind.MALFORMED_LABEL
