"""Abstract base class for local key-value stores.

This module defines the interface for local persistence.
The abstraction hides:
- Storage format (JSON file, in-memory dict)
- Persistence mechanism and write strategy

Values are strings, mirroring browser localStorage semantics. Callers
serialize structured values themselves.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract synchronous key-value store.

    Single writer, single thread: writes are applied immediately and are
    not guarded by any lock.
    """

    @abstractmethod
    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the stored value for `key`, or `default` if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, persisting immediately."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key` if present."""

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None
