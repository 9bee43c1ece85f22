"""Generic registry for pluggable indicators, sources and narrative generators."""

import logging
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Registry(Generic[T]):
    """
    Name-to-class registry.

    Example:
        source_registry = Registry[DexSource]("source")

        @source_registry.register("dexscreener", role="dex", live=True)
        class DexScreenerSource:
            def __init__(self, base_url: str, timeout: float = 10.0):
                ...

        source = source_registry.create("dexscreener", base_url="https://...")
    """

    def __init__(self, name: str):
        """Initialize registry with a name for logging."""
        self.name = name
        self._items: dict[str, type[T]] = {}
        self._metadata: dict[str, dict[str, Any]] = {}

    def register(
        self,
        name: str,
        *,
        description: str = "",
        **metadata: Any,
    ) -> Callable[[type[T]], type[T]]:
        """
        Decorator to register a class.

        Args:
            name: Unique name to register the class under
            description: Human-readable description
            **metadata: Additional metadata to store (e.g. role, live)

        Returns:
            Decorator function
        """

        def decorator(klass: type[T]) -> type[T]:
            if name in self._items:
                logger.warning(
                    f"[{self.name}] Overwriting existing registration: {name}"
                )
            self._items[name] = klass
            self._metadata[name] = {
                "description": description or (klass.__doc__ or "").strip().split("\n")[0],
                "class": klass.__name__,
                "module": klass.__module__,
                **metadata,
            }
            logger.debug(f"[{self.name}] Registered: {name} -> {klass.__name__}")
            return klass

        return decorator

    def get(self, name: str) -> type[T]:
        """
        Get a registered class by name.

        Raises:
            KeyError: If name is not registered
        """
        if name not in self._items:
            available = ", ".join(self._items.keys())
            raise KeyError(
                f"[{self.name}] '{name}' not found. Available: {available}"
            )
        return self._items[name]

    def create(self, name: str, **params: Any) -> T:
        """Create an instance of a registered class with parameters."""
        klass = self.get(name)
        return klass(**params)

    def find(self, **criteria: Any) -> list[str]:
        """Names whose metadata matches every ``key=value`` in ``criteria``."""
        return [
            name
            for name, meta in self._metadata.items()
            if all(meta.get(key) == value for key, value in criteria.items())
        ]

    def list(self) -> list[str]:
        """Get list of all registered names."""
        return list(self._items.keys())

    def list_with_metadata(self) -> dict[str, dict[str, Any]]:
        """Get all registered items with their metadata."""
        return {name: self._metadata.get(name, {}) for name in self._items}

    def metadata(self, name: str) -> dict[str, Any]:
        """Get the metadata stored for one registration."""
        self.get(name)
        return self._metadata[name]

    def contains(self, name: str) -> bool:
        """Check if a name is registered."""
        return name in self._items

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def __len__(self) -> int:
        return len(self._items)
