"""Base key-value store interface."""

from abc import ABC, abstractmethod
from typing import Any


class StorageError(Exception):
    """Raised when a store cannot read or write a value."""


class BaseStore(ABC):
    """Abstract base class for JSON-valued key-value stores.

    Values are plain JSON-compatible structures. Implementations raise
    StorageError for any I/O or decoding failure.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the value stored under key, or None if absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under key."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is a no-op."""
        ...

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]:
        """List stored keys starting with prefix."""
        ...
