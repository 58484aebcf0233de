"""Event publishers implementing EventPublisherPort."""

from cwmetrics.adapters.publishers.in_memory import InMemoryEventPublisher
from cwmetrics.adapters.publishers.ring_buffer import RingBufferEventPublisher
from cwmetrics.adapters.publishers.stream import StreamEventPublisher

__all__ = [
    "InMemoryEventPublisher",
    "RingBufferEventPublisher",
    "StreamEventPublisher",
]
