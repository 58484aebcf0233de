"""NDJSON stream event publisher."""

import sys
from typing import TextIO

from cwmetrics.core.encoding.ndjson import encode_event
from cwmetrics.core.models import Event


class StreamEventPublisher:
    """Writes each published event as one NDJSON line to a text stream.

    Args:
        stream: Destination stream. Defaults to sys.stdout.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def publish(self, event: Event) -> None:
        self._stream.write(encode_event(event) + "\n")
        self._stream.flush()
