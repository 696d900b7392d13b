"""Callback interface between the advisor and the TUI.

Hides the details of how the TUI receives streamed tokens and trace
messages. The advisor runs in an async worker on the app's event loop, so
widgets are updated directly.
"""

from typing import TYPE_CHECKING

from .config import STREAM_BUFFER_THRESHOLD, LogLevel

if TYPE_CHECKING:
    from .widgets import ChatHistoryWidget, DebugPanel


class TUICallback:
    """Routes advisor stream chunks and debug messages to widgets."""

    def __init__(
        self,
        chat: "ChatHistoryWidget",
        log_panel: "DebugPanel | None" = None,
    ) -> None:
        self.chat = chat
        self.log_panel = log_panel
        self._stream_buffer: list[str] = []
        self._stream_chars_since_update = 0

    def handle_debug(self, level: str, component: str, message: str) -> None:
        """Debug callback: Callable(level, component, message)."""
        if self.log_panel is None:
            return
        self.log_panel.log_message(component, message, LogLevel.from_string(level))

    def handle_stream_chunk(self, chunk: str) -> None:
        """Handle a streaming chunk from the chat endpoint.

        Special signals:
        - __START__: Beginning of streaming
        - __END__: End of streaming
        - Other strings: Actual token content

        Buffers and updates the preview every ~50 characters.
        """
        if chunk == "__START__":
            self._stream_buffer = []
            self._stream_chars_since_update = 0
            self.chat.begin_stream()
            return

        if chunk == "__END__":
            self._flush()
            return

        self._stream_buffer.append(chunk)
        self._stream_chars_since_update += len(chunk)
        if self._stream_chars_since_update >= STREAM_BUFFER_THRESHOLD:
            self._flush()

    def _flush(self) -> None:
        if self._stream_buffer:
            self.chat.append_stream("".join(self._stream_buffer))
        self._stream_buffer = []
        self._stream_chars_since_update = 0
