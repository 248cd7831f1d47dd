"""Abstract base class for key/value storage backends.

This module defines the interface the conversation store writes through.
The abstraction hides:
- Persistence mechanism (SQLite file, process memory)
- Connection management
"""

from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """Abstract string key/value storage.

    Values are opaque strings; each write replaces the previous value
    of the key wholesale.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Initialize the storage backend."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the storage backend gracefully."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key if present."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    async def __aenter__(self) -> "KeyValueStorage":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
