"""NDJSON encoder for events."""

import json
from collections.abc import Iterable

from cwmetrics.core.models import Event


def encode_event(event: Event) -> str:
    """Encode a single event as one JSON line without trailing newline."""
    return json.dumps(event.to_dict())


def encode_events(events: Iterable[Event]) -> str:
    """Encode events to newline-delimited JSON.

    Args:
        events: An iterable of Event objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no events.
    """
    lines = [encode_event(event) for event in events]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
