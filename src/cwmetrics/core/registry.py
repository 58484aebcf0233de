"""Registry mapping collector names to factory functions."""

from collections.abc import Callable
from typing import Any

CollectorFactory = Callable[..., Any]


class CollectorRegistry:
    """Registration table of collector factories keyed by name."""

    def __init__(self) -> None:
        self._factories: dict[str, CollectorFactory] = {}

    def register(self, name: str, factory: CollectorFactory) -> None:
        """Register a factory under a name.

        Raises:
            TypeError: If factory is not callable.
            ValueError: If the name is already registered.
        """
        if not callable(factory):
            raise TypeError(f"factory must be callable, got {type(factory).__name__}")
        if name in self._factories:
            raise ValueError(f"collector {name!r} is already registered")
        self._factories[name] = factory

    def lookup(self, name: str) -> CollectorFactory | None:
        return self._factories.get(name)

    def create(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Instantiate a registered collector.

        Raises:
            KeyError: If no factory is registered under name.
        """
        factory = self.lookup(name)
        if factory is None:
            raise KeyError(f"no collector registered as {name!r}")
        return factory(*args, **kwargs)

    def names(self) -> list[str]:
        return sorted(self._factories)

