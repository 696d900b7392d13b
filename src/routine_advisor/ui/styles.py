"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.

Layout: catalog | selection | chat, side by side.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - Three Columns
   ============================================ */
Screen {
    background: $background;
}

#main {
    layout: horizontal;
    height: 1fr;
}

/* ============================================
   Catalog Panel - Category Filter + Cards
   ============================================ */
#catalog-panel {
    width: 2fr;
    height: 100%;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;

    &:focus-within {
        border: round $primary;
    }
}

#category-filter {
    width: 100%;
    margin-bottom: 1;
}

#products {
    height: 1fr;
    scrollbar-gutter: stable;
}

.placeholder-message {
    width: 100%;
    height: auto;
    padding: 1 2;
    color: $text-muted;
    text-style: italic;
    text-align: center;
}

/* ============================================
   Product Cards
   ============================================ */
ProductCard {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
    border: round $border;
    background: $surface;

    &:hover {
        border: round $primary 60%;
    }

    /* Selected highlight, derived from the selection store */
    &.selected {
        border: round $accent;
        background: $accent 10%;
    }

    & .product-name {
        text-style: bold;
        color: $foreground;
    }

    & .product-brand {
        color: $text-muted;
    }

    & .details-btn {
        width: auto;
        min-width: 10;
        height: 1;
        border: none;
        margin: 0;
    }

    & .product-desc {
        padding: 0 0 1 0;
        color: $foreground;
    }
}

/* ============================================
   Selection Panel - Pills + Actions
   ============================================ */
#selection-panel {
    width: 1fr;
    height: 100%;
    background: $panel;
    border: round $accent 60%;
    border-title-color: $accent;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
}

#selected-products {
    height: 1fr;
    scrollbar-gutter: stable;
}

Pill {
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
    background: $accent 15%;
    border-left: tall $accent;

    & .pill-label {
        width: 1fr;
        height: auto;
    }

    & .remove-pill {
        width: 5;
        min-width: 5;
        height: 1;
        border: none;
        margin: 0;
        background: transparent;
        color: $error;

        &:hover {
            background: $error 20%;
        }
    }
}

#selection-actions {
    height: auto;
    padding: 1 0 0 0;

    Button {
        width: 1fr;
        margin: 0 1 0 0;
    }
}

/* ============================================
   Chat Panel - History + Input
   ============================================ */
#chat-panel {
    width: 2fr;
    height: 100%;
}

#chat-history {
    height: 1fr;
    background: $panel;
    border: round $secondary 60%;
    border-title-color: $secondary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $secondary;
    }
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    min-width: 8;
    border: tall $success;
    background: $success;
    color: $background;
    text-style: bold;

    &:hover {
        background: $success-lighten-1;
    }

    &:disabled {
        background: $surface;
        border: tall $border;
        color: $text-disabled;
    }
}

/* ============================================
   Chat Messages
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
}

.user-message {
    border-left: tall $success;
    background: $success 8%;

    & .message-header {
        color: $success;
        text-style: bold;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $secondary 8%;

    & .message-header {
        color: $secondary;
        text-style: bold;
    }
}

.error-message {
    border-left: tall $error;
    background: $error 10%;

    & .message-header {
        color: $error;
        text-style: bold;
    }
}

.streaming-message {
    border-left: tall $warning;
    background: $warning 6%;
    color: $text-muted;
}

.message-header,
.message-content {
    height: auto;
    padding: 0;
    margin: 0;
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    scrollbar-gutter: stable;
}

Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-error {
        border: tall $error;
        background: $error 12%;
    }
}
"""
