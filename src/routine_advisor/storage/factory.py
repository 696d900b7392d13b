"""Factory for creating key-value stores."""

from typing import Any

from .base import KeyValueStore


def create_store(backend: str = "json", **kwargs: Any) -> KeyValueStore:
    """Create a key-value store.

    Args:
        backend: Backend type ("json" or "memory")
        **kwargs: Backend-specific configuration
            For json:
                - path: str | Path (default: ~/.routine_advisor/state.json)
            For memory:
                - initial: dict[str, str] | None

    Returns:
        KeyValueStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "json":
        from .json_file import JSONFileStore
        return JSONFileStore(**kwargs)

    elif backend == "memory":
        from .in_memory import InMemoryStore
        return InMemoryStore(**kwargs)

    raise ValueError(
        f"Unsupported storage backend: {backend}. "
        f"Supported backends: json, memory"
    )
