"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Product card and pill rendering, keyed by product id
- Reconciling the pill list against the selection
- Chat bubble rendering and the streaming preview
- Input history management
- Log rendering and level filtering

Catalog and user text is always wrapped in rich.text.Text so it is never
parsed as markup.
"""

from datetime import datetime

from rich.text import Text
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from ..advisor import Bubble
from .config import (
    CATALOG_PLACEHOLDER,
    CHAT_PLACEHOLDER,
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    SELECTION_PLACEHOLDER,
    LogLevel,
)
from .views import CardState, PillState


class ProductCard(Vertical):
    """A catalog product. Clicking the card toggles its selection."""

    can_focus = True

    BINDINGS = [
        Binding("space,enter", "toggle_selection", "Select", show=False),
        Binding("d", "toggle_details", "Details", show=False),
    ]

    class Toggled(Message):
        """Posted when the user clicks the card body."""

        def __init__(self, product_id: int) -> None:
            super().__init__()
            self.product_id = product_id

    class DetailsToggled(Message):
        """Posted when the user presses the Details button."""

        def __init__(self, product_id: int) -> None:
            super().__init__()
            self.product_id = product_id

    def __init__(self, state: CardState) -> None:
        super().__init__(id=state.key, classes="product-card")
        self._product = state.product
        self._expanded = state.expanded
        self.set_class(state.selected, "selected")

    @property
    def product_id(self) -> int:
        return self._product.id

    def compose(self):
        yield Static(Text(self._product.name), classes="product-name")
        yield Static(Text(self._product.brand), classes="product-brand")
        yield Button(self._details_label(), classes="details-btn")
        description = Static(Text(self._product.description), classes="product-desc")
        description.display = self._expanded
        yield description

    def _details_label(self) -> str:
        return "Hide details" if self._expanded else "Details"

    def set_expanded(self, expanded: bool) -> None:
        """Show or hide the description."""
        self._expanded = expanded
        self.query_one(".product-desc", Static).display = expanded
        self.query_one(".details-btn", Button).label = self._details_label()

    def set_selected(self, selected: bool) -> None:
        self.set_class(selected, "selected")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(self.DetailsToggled(self._product.id))

    def on_click(self, event: Click) -> None:
        event.stop()
        self.post_message(self.Toggled(self._product.id))

    def action_toggle_selection(self) -> None:
        self.post_message(self.Toggled(self._product.id))

    def action_toggle_details(self) -> None:
        self.post_message(self.DetailsToggled(self._product.id))


class ProductGrid(VerticalScroll):
    """Cards for the products of the chosen category."""

    async def show(self, cards: list[CardState] | None) -> None:
        """Replace the visible cards.

        Args:
            cards: Card states to show, or None before any category is chosen
        """
        await self.remove_children()
        if cards is None:
            await self.mount(Static(CATALOG_PLACEHOLDER, classes="placeholder-message"))
            return
        if not cards:
            await self.mount(Static("No products in this category.", classes="placeholder-message"))
            return
        await self.mount_all([ProductCard(state) for state in cards])

    def card(self, product_id: int) -> ProductCard | None:
        for card in self.query(ProductCard):
            if card.product_id == product_id:
                return card
        return None

    def sync_selection(self, selected_ids: frozenset[int]) -> None:
        """Re-derive every visible card's highlight from the selection."""
        for card in self.query(ProductCard):
            card.set_selected(card.product_id in selected_ids)


class Pill(Horizontal):
    """A selected product with a remove button."""

    class Removed(Message):
        """Posted when the pill's remove button is pressed."""

        def __init__(self, product_id: int) -> None:
            super().__init__()
            self.product_id = product_id

    def __init__(self, state: PillState) -> None:
        super().__init__(id=state.key, classes="pill")
        self._state = state

    @property
    def product_id(self) -> int:
        return self._state.product_id

    def compose(self):
        yield Static(Text(self._state.label), classes="pill-label")
        yield Button("x", classes="remove-pill").with_tooltip(f"Remove {self._state.label}")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(self.Removed(self._state.product_id))


class SelectedProducts(VerticalScroll):
    """The pill list. Reconciled against the selection by product id."""

    def compose(self):
        yield Static(SELECTION_PLACEHOLDER, id="selection-placeholder", classes="placeholder-message")

    async def sync(self, pills: list[PillState]) -> None:
        """Make the mounted pills match `pills`, keeping their order."""
        wanted = {p.key for p in pills}
        existing = {pill.id: pill for pill in self.query(Pill)}

        for key, widget in list(existing.items()):
            if key not in wanted:
                await widget.remove()
                del existing[key]

        for index, state in enumerate(pills):
            if state.key in existing:
                continue
            following = next(
                (existing[p.key] for p in pills[index + 1:] if p.key in existing),
                None,
            )
            widget = Pill(state)
            if following is not None:
                await self.mount(widget, before=following)
            else:
                await self.mount(widget)
            existing[state.key] = widget

        self.query_one("#selection-placeholder", Static).display = not pills

    def keys(self) -> list[str]:
        """Mounted pill ids in display order."""
        return [pill.id for pill in self.query(Pill) if pill.id]


class ClickableMessage(Vertical):
    """A chat message container that copies its content when clicked."""

    def __init__(self, content: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = content

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self._content)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat bubbles plus a live preview while a reply streams."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Ask about your routine"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._bubbles: list[Bubble] = []
        self._stream_widget: Static | None = None
        self._stream_text = ""

    def compose(self):
        yield Static(CHAT_PLACEHOLDER, id="chat-placeholder", classes="placeholder-message")

    @property
    def bubbles(self) -> list[Bubble]:
        return list(self._bubbles)

    def add_bubble(self, bubble: Bubble) -> None:
        """Render a bubble and scroll to it."""
        self._remove_placeholder()
        if bubble.role == "assistant":
            self.end_stream()
        self._bubbles.append(bubble)
        self.mount(self._render_bubble(bubble))
        self.border_subtitle = f"{len(self._bubbles)} messages"
        self.scroll_end(animate=False)

    def begin_stream(self) -> None:
        """Show an empty preview bubble for a reply in progress."""
        self._remove_placeholder()
        self._stream_text = ""
        self._stream_widget = Static(Text("..."), classes="chat-message streaming-message")
        self.mount(self._stream_widget)
        self.scroll_end(animate=False)

    def append_stream(self, text: str) -> None:
        if self._stream_widget is None:
            self.begin_stream()
        self._stream_text += text
        self._stream_widget.update(Text(self._stream_text))
        self.scroll_end(animate=False)

    def end_stream(self) -> None:
        """Drop the preview; the final bubble replaces it."""
        if self._stream_widget is not None:
            self._stream_widget.remove()
            self._stream_widget = None
            self._stream_text = ""

    def get_last_response(self) -> str | None:
        for bubble in reversed(self._bubbles):
            if bubble.role == "assistant" and not bubble.is_error:
                return bubble.text
        return None

    def clear_history(self) -> None:
        self._bubbles.clear()
        self.end_stream()
        self.remove_children()
        self.mount(Static(CHAT_PLACEHOLDER, id="chat-placeholder", classes="placeholder-message"))
        self.border_subtitle = self.BORDER_SUBTITLE

    def _remove_placeholder(self) -> None:
        for placeholder in self.query("#chat-placeholder"):
            placeholder.remove()

    def _render_bubble(self, bubble: Bubble) -> ClickableMessage:
        if bubble.role == "user":
            prefix, css_class, icon = "You", "user-message", ">"
        elif bubble.is_error:
            prefix, css_class, icon = "Advisor", "error-message", "!"
        else:
            prefix, css_class, icon = "Advisor", "assistant-message", "<"

        timestamp = bubble.timestamp.strftime("%H:%M:%S")
        container = ClickableMessage(content=bubble.text, classes=f"chat-message {css_class}")
        container.compose_add_child(
            Static(Text(f"{icon} {prefix} [{timestamp}]"), classes="message-header")
        )
        if bubble.role == "assistant" and not bubble.is_error:
            # Model replies are markdown; Markdown does not interpret Rich markup
            container.compose_add_child(Markdown(bubble.text, classes="message-content"))
        else:
            container.compose_add_child(Static(Text(bubble.text), classes="message-content"))
        return container


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        self.query_one("#chat-input", TextArea).highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Terminals do not pass modifiers with Enter, so ctrl+j submits.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self.query_one("#send-btn", Button).disabled:
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        text_area.text = ""
        if not value:
            return
        if not self._history or self._history[-1] != value:
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        self.post_message(self.Submitted(value))

    def set_busy(self, busy: bool) -> None:
        """Disable sending while a request is in flight."""
        self.query_one("#send-btn", Button).disabled = busy

    def focus_input(self) -> None:
        self.query_one("#chat-input", TextArea).focus()


class DebugPanel(RichLog):
    """Log panel for tracing requests and state changes, filtered by level.

    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Advisor": "magenta",
        "LLM": "bright_magenta",
        "Selection": "green",
        "Catalog": "bright_blue",
        "Storage": "bright_green",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=False,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        self.display = False

    def log_message(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        line = Text()
        line.append(datetime.now().strftime(LOG_TIMESTAMP_FORMAT), style="dim")
        line.append(" ")
        line.append(f"{LogLevel.name(level):<7}", style=self.LEVEL_COLORS.get(level, "white"))
        line.append(f"[{component}] ", style=self.COMPONENT_COLORS.get(component, "white"))
        line.append(message)
        self.write(line)

    def info(self, component: str, message: str) -> None:
        self.log_message(component, message, LogLevel.INFO)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
