"""JSON file key-value store.

Persists the whole key space as a single JSON object. Every write rewrites
the file through a temporary file and an atomic replace, so a crash never
leaves a half-written state file behind.
"""

import json
import os
import tempfile
from pathlib import Path

from ..errors import StorageError
from .base import KeyValueStore

DEFAULT_STATE_PATH = Path.home() / ".routine_advisor" / "state.json"


class JSONFileStore(KeyValueStore):
    """File-backed store that survives restarts."""

    def __init__(self, path: str | Path = DEFAULT_STATE_PATH):
        self._path = Path(path).expanduser()
        self._data = self._load()

    @property
    def path(self) -> Path:
        """Location of the state file."""
        return self._path

    def _load(self) -> dict[str, str]:
        """Read the state file. A missing file is an empty store."""
        if not self._path.exists():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read state file {self._path}: {e}") from e

        if not isinstance(raw, dict):
            raise StorageError(f"State file {self._path} must contain a JSON object")

        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in raw.items()}

    def _flush(self) -> None:
        """Write the full key space to disk atomically."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(self._data, tmp, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except OSError as e:
            raise StorageError(f"Cannot write state file {self._path}: {e}") from e

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def keys(self) -> list[str]:
        return list(self._data)

    @property
    def backend_type(self) -> str:
        return "json"
