"""Terminal UI module for routine-advisor.

Provides a Textual-based TUI over the selection store and chat advisor.

Module structure (each module hides a design decision):
- views.py: Derived card/pill state keyed by product id
- widgets.py: Product cards, pills, chat bubbles, input bar, log panel
- styles.py: CSS styling (layout decisions)
- themes.py: Dark and light palettes
- callbacks.py: How the TUI receives streamed tokens and trace messages
- app.py: Application orchestration (user interaction flow)
"""

from .app import RoutineAdvisorApp, run_textual_tui
from .callbacks import TUICallback
from .config import LogLevel
from .views import CardState, CatalogView, PillState, pills
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, ProductCard, SelectedProducts

__all__ = [
    "CardState",
    "CatalogView",
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "LogLevel",
    "PillState",
    "ProductCard",
    "RoutineAdvisorApp",
    "SelectedProducts",
    "TUICallback",
    "pills",
    "run_textual_tui",
]
