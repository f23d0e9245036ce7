"""Factory for creating key/value storage backends."""

from typing import Any

from .base import KeyValueStorage


def create_storage(
    backend: str = "json",
    **kwargs: Any
) -> KeyValueStorage:
    """Create a key/value storage backend.

    Args:
        backend: Backend type ("json", "sqlite" or "memory")
        **kwargs: Backend-specific configuration
            For json / sqlite:
                - path: str | Path (file location)
            For memory:
                - initial: dict[str, str] | None

    Returns:
        KeyValueStorage instance

    Raises:
        ValueError: If backend type is not supported
    """
    backend_lower = backend.lower()

    if backend_lower == "json":
        from .json_file import JsonFileStorage
        return JsonFileStorage(**kwargs)

    elif backend_lower == "sqlite":
        from .sqlite import SQLiteStorage
        return SQLiteStorage(**kwargs)

    elif backend_lower == "memory":
        from .in_memory import InMemoryStorage
        return InMemoryStorage(**kwargs)

    raise ValueError(
        f"Unsupported storage backend: {backend}. "
        f"Supported backends: json, sqlite, memory"
    )
