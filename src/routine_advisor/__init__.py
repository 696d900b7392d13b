"""
routine-advisor: a terminal beauty-product picker and routine chat.

Pick products from a static catalog, keep the selection locally, and ask a
chat-completion endpoint for a routine built from it.
"""

__version__ = "0.1.0"

from .advisor import AdvisorReply, Bubble, ChatAdvisor
from .catalog import Catalog, Product, load_catalog
from .selection import SelectionStore
from .storage import KeyValueStore, ThemePreference, create_store

__all__ = [
    "AdvisorReply",
    "Bubble",
    "Catalog",
    "ChatAdvisor",
    "KeyValueStore",
    "Product",
    "SelectionStore",
    "ThemePreference",
    "create_store",
    "load_catalog",
]
