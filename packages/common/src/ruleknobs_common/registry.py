"""Generic registry pattern for managing keyed items.

Packages extend this to keep a thread-safe lookup table of items keyed by
anything hashable (names, model types, ...).

Example:
    ```python
    from ruleknobs_common.registry import Registry

    class ValidatorRegistry(Registry[type, type[Validator]]):
        def __init__(self):
            super().__init__("validators")

    registry = ValidatorRegistry()
    registry.register(User, UserValidator, metadata={"module": __name__})
    validator_cls = registry.get(User)
    ```
"""

import threading
from typing import (
    Any,
    Dict,
    Generic,
    Hashable,
    Iterator,
    List,
    TypeVar,
)

from ruleknobs_common.exceptions import NotFoundError, OperationError

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


def describe_key(key: Any) -> str:
    """Readable name for a registry key.

    Classes are shown by their qualified name, everything else by ``str()``.
    """
    if isinstance(key, type):
        return key.__qualname__
    return str(key)


class Registry(Generic[K, T]):
    """Base registry for managing keyed items.

    Lookups, registration and enumeration are guarded by a re-entrant lock so
    a registry can be shared between threads. Insertion order is preserved.

    Attributes:
        name: Name of the registry (for logging/debugging)

    Example:
        ```python
        registry = Registry[str, int]("counts")
        registry.register("a", 1)
        registry.get("a")
        # 1
        ```
    """

    def __init__(self, name: str):
        """Initialize the registry.

        Args:
            name: Registry name for identification
        """
        self._name = name
        self._items: Dict[K, T] = {}
        self._metadata: Dict[K, Dict[str, Any]] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        """Get registry name."""
        return self._name

    def register(
        self,
        key: K,
        item: T,
        metadata: Dict[str, Any] | None = None,
        allow_overwrite: bool = False,
    ) -> None:
        """Register an item by key.

        Args:
            key: Unique identifier for the item
            item: Item to register
            metadata: Optional metadata about the item
            allow_overwrite: Whether to allow overwriting existing items

        Raises:
            OperationError: If item already exists and allow_overwrite is False
        """
        with self._lock:
            if not allow_overwrite and key in self._items:
                raise OperationError(
                    f"Item '{describe_key(key)}' already registered in {self._name}",
                    context={"key": describe_key(key), "registry": self._name},
                )
            self._items[key] = item
            self._metadata[key] = dict(metadata or {})

    def get(self, key: K) -> T:
        """Get an item by key.

        Raises:
            NotFoundError: If item not found
        """
        with self._lock:
            if key not in self._items:
                raise NotFoundError(
                    f"Item not found: {describe_key(key)}",
                    context={
                        "key": describe_key(key),
                        "registry": self._name,
                        "available_keys": [describe_key(k) for k in self._items],
                    },
                )
            return self._items[key]

    def get_optional(self, key: K) -> T | None:
        """Get an item by key, returning None if not found."""
        with self._lock:
            return self._items.get(key)

    def get_metadata(self, key: K) -> Dict[str, Any]:
        """Get the metadata recorded when ``key`` was registered.

        Raises:
            NotFoundError: If item not found
        """
        with self._lock:
            if key not in self._metadata:
                raise NotFoundError(
                    f"Item not found: {describe_key(key)}",
                    context={"key": describe_key(key), "registry": self._name},
                )
            return dict(self._metadata[key])

    def has(self, key: K) -> bool:
        """Check if item exists."""
        with self._lock:
            return key in self._items

    def list_keys(self) -> List[K]:
        """List all registered keys in registration order."""
        with self._lock:
            return list(self._items.keys())

    def list_items(self) -> List[T]:
        """List all registered items in registration order."""
        with self._lock:
            return list(self._items.values())

    def count(self) -> int:
        """Get count of registered items."""
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        """Clear all items from registry."""
        with self._lock:
            self._items.clear()
            self._metadata.clear()

    def __len__(self) -> int:
        """Get number of registered items using len()."""
        return self.count()

    def __contains__(self, key: object) -> bool:
        """Check if item exists using 'in' operator."""
        with self._lock:
            return key in self._items

    def __iter__(self) -> Iterator[T]:
        """Iterate over registered items."""
        return iter(self.list_items())


__all__ = ["Registry", "describe_key"]
