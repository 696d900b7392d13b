"""Main Textual TUI application.

Wires the catalog grid, the selected-products pills, and the chat panel to
one SelectionStore and one ChatAdvisor. Selection changes flow one way:
store mutation -> listener -> grid highlights and pill list re-derived.
"""

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Select

from ..advisor import AdvisorReply, ChatAdvisor
from ..catalog import Catalog
from ..errors import AdvisorBusyError
from ..llm import LLMProvider
from ..selection import SelectionStore
from ..storage import KeyValueStore, ThemePreference
from .callbacks import TUICallback
from .config import LogLevel
from .styles import APP_CSS
from .themes import ADVISOR_DARK, ADVISOR_LIGHT, theme_name
from .views import CatalogView, pills
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    Pill,
    ProductCard,
    ProductGrid,
    SelectedProducts,
)


class RoutineAdvisorApp(App):
    """Textual TUI for picking products and chatting about a routine."""

    CSS = APP_CSS
    TITLE = "Routine Advisor"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+g", "generate_routine", "Generate"),
        Binding("ctrl+x", "clear_selection", "Clear Selection"),
        Binding("ctrl+k", "clear_chat", "New Chat"),
        Binding("ctrl+t", "toggle_theme", "Theme"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log"),
    ]

    def __init__(
        self,
        catalog: Catalog,
        store: KeyValueStore,
        llm: LLMProvider,
        model: str | None = None,
        history_limit: int | None = None,
        log_level: str | None = None,
        stream: bool = False,
    ) -> None:
        super().__init__()
        self._catalog = catalog
        self._store = store
        self._llm = llm
        self._log_level = log_level
        self._stream = stream
        self._theme_pref = ThemePreference(store)
        self._selection = SelectionStore(store, catalog)
        self._view = CatalogView(catalog, self._selection)
        self._advisor = ChatAdvisor(
            llm, self._selection, model=model, history_limit=history_limit
        )
        self._unsubscribe: Callable[[], None] | None = None
        self._request_pending = False

    @property
    def selection(self) -> SelectionStore:
        return self._selection

    @property
    def advisor(self) -> ChatAdvisor:
        return self._advisor

    @property
    def catalog_view(self) -> CatalogView:
        return self._view

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Horizontal(id="main"):
            with Vertical(id="catalog-panel"):
                yield Select(
                    [(category.title(), category) for category in self._catalog.categories()],
                    prompt="Choose a category",
                    id="category-filter",
                )
                yield ProductGrid(id="products")

            with Vertical(id="selection-panel"):
                yield SelectedProducts(id="selected-products")
                with Horizontal(id="selection-actions"):
                    yield Button("Generate Routine", id="generate-btn", variant="success")
                    yield Button("Clear All", id="clear-btn", variant="error")

            with Vertical(id="chat-panel"):
                yield ChatHistoryWidget(id="chat-history")
                yield ChatInputBar(id="chat-input-bar")
                yield DebugPanel(id="debug-panel")

        yield Footer()

    async def on_mount(self) -> None:
        self.register_theme(ADVISOR_DARK)
        self.register_theme(ADVISOR_LIGHT)
        self.theme = theme_name(self._theme_pref.load())

        self.query_one("#catalog-panel").border_title = "Products"
        self.query_one("#selection-panel").border_title = "Selected"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        chat = self.query_one("#chat-history", ChatHistoryWidget)
        callback = TUICallback(chat, log_panel)
        self._advisor.set_bubble_callback(chat.add_bubble)
        self._advisor.set_debug_callback(callback.handle_debug)
        if self._stream:
            self._advisor.set_stream_callback(callback.handle_stream_chunk)

        self.sub_title = f"{self._advisor.model} | {len(self._catalog)} products"

        await self.query_one("#products", ProductGrid).show(None)
        await self._refresh_selection_views()
        self._unsubscribe = self._selection.subscribe(self._on_selection_changed)

        restored = len(self._selection)
        if restored:
            log_panel.info("Selection", f"Restored {restored} selected product(s)")
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ------------------------------------------------------------------
    # Selection synchronization
    # ------------------------------------------------------------------

    def _on_selection_changed(self, selection: SelectionStore) -> None:
        """Selection listener. Re-render runs on the next message cycle."""
        self.call_later(self._refresh_selection_views)

    async def _refresh_selection_views(self) -> None:
        grid = self.query_one("#products", ProductGrid)
        grid.sync_selection(self._selection.ids())
        await self.query_one("#selected-products", SelectedProducts).sync(pills(self._selection))
        count = len(self._selection)
        self.query_one("#selection-panel").border_subtitle = f"{count} selected" if count else ""

    @on(Select.Changed, "#category-filter")
    async def on_category_changed(self, event: Select.Changed) -> None:
        category = event.value if isinstance(event.value, str) else None
        self._view.show_category(category)
        grid = self.query_one("#products", ProductGrid)
        if category is None:
            await grid.show(None)
            self.query_one("#catalog-panel").border_subtitle = ""
            return
        cards = self._view.cards()
        await grid.show(cards)
        self.query_one("#catalog-panel").border_subtitle = f"{len(cards)} in {category}"

    def on_product_card_toggled(self, event: ProductCard.Toggled) -> None:
        selected = self._selection.toggle(event.product_id)
        self._debug("debug", "Selection", f"Product {event.product_id} {'selected' if selected else 'deselected'}")

    def on_product_card_details_toggled(self, event: ProductCard.DetailsToggled) -> None:
        expanded = self._view.toggle_details(event.product_id)
        card = self.query_one("#products", ProductGrid).card(event.product_id)
        if card is not None:
            card.set_expanded(expanded)

    def on_pill_removed(self, event: Pill.Removed) -> None:
        self._selection.remove(event.product_id)

    @on(Button.Pressed, "#clear-btn")
    def on_clear_pressed(self) -> None:
        self.action_clear_selection()

    @on(Button.Pressed, "#generate-btn")
    def on_generate_pressed(self) -> None:
        self.action_generate_routine()

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        self._start_request(lambda: self._advisor.ask(event.value))

    def _start_request(self, action: Callable[[], Awaitable[AdvisorReply]]) -> None:
        """Lock the send controls and hand `action` to a worker.

        The lock is taken here, before the worker starts, so a second key
        press cannot launch a second request.
        """
        if self._request_pending or self._advisor.busy:
            self.notify("Still waiting for the last reply", severity="warning", timeout=2)
            return
        self._request_pending = True
        self._set_busy(True)
        self._run_advisor(action)

    def _set_busy(self, busy: bool) -> None:
        """Disable the controls that send requests while one is in flight."""
        self.query_one("#generate-btn", Button).disabled = busy
        self.query_one("#chat-input-bar", ChatInputBar).set_busy(busy)
        self.sub_title = "Thinking..." if busy else f"{self._advisor.model} | {len(self._catalog)} products"

    @work(group="advisor")
    async def _run_advisor(self, action: Callable[[], Awaitable[AdvisorReply]]) -> None:
        """Run one advisor call as a background async worker.

        The caller disables the triggering controls first; they are re-enabled
        once the request settles. A request rejected as busy belongs to
        someone else, so it leaves the controls locked.
        """
        owns_lock = True
        try:
            reply = await action()
            if reply.errors:
                self.notify("The advisor could not answer", severity="error", timeout=4)
        except AdvisorBusyError:
            owns_lock = False
            self.notify("Still waiting for the last reply", severity="warning", timeout=2)
        except Exception as e:
            self._debug("error", "TUI", f"Exception: {e}")
            self.notify(f"Error: {str(e)[:50]}", severity="error", timeout=5)
        finally:
            if owns_lock:
                self._request_pending = False
                self._set_busy(False)

    def _debug(self, level: str, component: str, message: str) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        log_panel.log_message(component, message, LogLevel.from_string(level))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_generate_routine(self) -> None:
        self._start_request(self._advisor.generate_routine)

    def action_clear_selection(self) -> None:
        if not len(self._selection.ids()):
            return
        self._selection.clear()
        self.notify("Selection cleared", timeout=2)

    def action_clear_chat(self) -> None:
        """Start a new conversation."""
        if self._request_pending or self._advisor.busy:
            self.notify("Wait for the current reply first", severity="warning", timeout=2)
            return
        self._advisor.reset()
        self.query_one("#chat-history", ChatHistoryWidget).clear_history()
        self.notify("New conversation started", timeout=2)

    def action_toggle_theme(self) -> None:
        new_theme = self._theme_pref.toggle()
        self.theme = theme_name(new_theme)
        self.notify(f"{new_theme.capitalize()} theme", timeout=2)

    def action_toggle_debug(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        response = self.query_one("#chat-history", ChatHistoryWidget).get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(
    catalog: Catalog,
    store: KeyValueStore,
    llm: LLMProvider,
    model: str | None = None,
    history_limit: int | None = None,
    log_level: str | None = None,
    stream: bool = False,
) -> None:
    """Run the Textual TUI.

    Args:
        catalog: Loaded product catalog
        store: Key-value store for the selection and theme
        llm: Chat endpoint provider (closed when the app exits)
        model: Model override
        history_limit: Cap on transcript messages sent per request
        log_level: Log level for panel (debug/info/warning/error), None to hide
        stream: Stream replies into a live preview
    """
    app = RoutineAdvisorApp(
        catalog=catalog,
        store=store,
        llm=llm,
        model=model,
        history_limit=history_limit,
        log_level=log_level,
        stream=stream,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(RuntimeError):
            await llm.close()
