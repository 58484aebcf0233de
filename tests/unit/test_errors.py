"""Tests for the collector error taxonomy."""

import pytest

from cwmetrics.core.errors import (
    CollectorError,
    ConfigurationError,
    DiscoveryError,
    ErrorKind,
    MalformedLabelError,
    MetadataError,
    QueryError,
    TagLookupError,
)

pytestmark = [pytest.mark.core, pytest.mark.tier(0)]


@pytest.mark.parametrize(
    ("error_type", "kind", "recoverable"),
    [
        (ConfigurationError, ErrorKind.CONFIGURATION, False),
        (DiscoveryError, ErrorKind.DISCOVERY, True),
        (QueryError, ErrorKind.QUERY, True),
        (TagLookupError, ErrorKind.TAG_LOOKUP, True),
        (MalformedLabelError, ErrorKind.MALFORMED_LABEL, True),
        (MetadataError, ErrorKind.METADATA, True),
    ],
)
def test_error_kinds(error_type: type[CollectorError], kind: ErrorKind, recoverable: bool) -> None:
    """Each error carries its kind and recoverability."""
    error = error_type("failed")
    assert isinstance(error, CollectorError)
    assert error.kind is kind
    assert error.recoverable is recoverable


def test_cause_is_wrapped() -> None:
    """The wrapped cause is chained and shown in the message."""
    cause = OSError("connection reset")

    error = QueryError("failed to get metric data in us-east-1", cause=cause)

    assert error.cause is cause
    assert error.__cause__ is cause
    assert str(error) == "failed to get metric data in us-east-1: connection reset"


def test_message_without_cause() -> None:
    assert str(DiscoveryError("cannot list")) == "cannot list"
