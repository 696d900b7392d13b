"""Product selection module."""

from .store import SELECTION_KEY, SelectionListener, SelectionStore

__all__ = ["SELECTION_KEY", "SelectionListener", "SelectionStore"]
