"""Storage adapters implementing core ports."""

from cwmetrics.adapters.storage.in_memory import InMemoryLogStorage

__all__ = ["InMemoryLogStorage"]
