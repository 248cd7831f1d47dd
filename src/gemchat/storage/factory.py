"""Factory for creating key/value storage backends."""

from typing import Any

from .base import KeyValueStorage


def create_storage(
    backend: str = "sqlite",
    **kwargs: Any
) -> KeyValueStorage:
    """Create a key/value storage backend.

    Args:
        backend: Backend type ("memory" or "sqlite")
        **kwargs: Backend-specific configuration

    Returns:
        KeyValueStorage instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemoryStorage
        return InMemoryStorage(**kwargs)

    elif backend == "sqlite":
        from .sqlite import SQLiteStorage
        return SQLiteStorage(**kwargs)

    raise ValueError(
        f"Unsupported storage backend: {backend}. "
        f"Supported backends: memory, sqlite"
    )
