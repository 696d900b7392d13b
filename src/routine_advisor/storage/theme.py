"""Persisted light/dark theme preference.

Independent of selection and chat state; shares only the store.
"""

from .base import KeyValueStore

THEME_KEY = "theme"
DARK = "dark"
LIGHT = "light"
DEFAULT_THEME = DARK
THEMES = (DARK, LIGHT)


class ThemePreference:
    """Reads and writes the theme flag in a key-value store."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def load(self) -> str:
        """Return the stored theme. Unknown or missing values yield the default."""
        value = self._store.get(THEME_KEY)
        return value if value in THEMES else DEFAULT_THEME

    def save(self, theme: str) -> None:
        """Persist `theme`.

        Raises:
            ValueError: If theme is not "dark" or "light"
        """
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}. Expected one of: {', '.join(THEMES)}")
        self._store.set(THEME_KEY, theme)

    def toggle(self) -> str:
        """Flip and persist the theme. Returns the new value."""
        new_theme = LIGHT if self.load() == DARK else DARK
        self.save(new_theme)
        return new_theme
