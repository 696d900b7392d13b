"""Local persistence module.

A localStorage-style key-value store holding the selection and theme.
"""

from .base import KeyValueStore
from .factory import create_store
from .in_memory import InMemoryStore
from .json_file import DEFAULT_STATE_PATH, JSONFileStore
from .theme import DARK, LIGHT, THEME_KEY, ThemePreference

__all__ = [
    "DARK",
    "DEFAULT_STATE_PATH",
    "InMemoryStore",
    "JSONFileStore",
    "KeyValueStore",
    "LIGHT",
    "THEME_KEY",
    "ThemePreference",
    "create_store",
]
