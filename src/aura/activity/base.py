"""Abstract base class for key/value storage backends.

This module defines the interface the activity log persists through.
The abstraction hides:
- Storage format (JSON document, SQLite table, dict)
- Persistence mechanism (file, database, in-memory)
- Connection management
"""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """Abstract string key/value store.

    Values are opaque strings; callers own their serialization.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the storage backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the storage backend gracefully."""

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Delete key if present."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""
