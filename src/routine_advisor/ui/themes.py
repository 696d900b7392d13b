"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)
- Mapping the persisted "dark"/"light" preference to a Textual theme
"""

from textual.theme import Theme

from ..storage import DARK, LIGHT
from .config import DARK_THEME_NAME, LIGHT_THEME_NAME

# Warm rose palette on a deep plum background
ADVISOR_DARK = Theme(
    name=DARK_THEME_NAME,
    primary="#f5c2e7",      # Pink - main accent
    secondary="#cba6f7",    # Mauve - assistant messages
    accent="#f9e2af",       # Gold - selected cards
    foreground="#cdd6f4",
    background="#11111b",
    success="#a6e3a1",      # Green - user messages, generate button
    warning="#fab387",
    error="#f38ba8",
    surface="#1e1e2e",
    panel="#181825",
    dark=True,
    variables={
        "block-cursor-foreground": "#11111b",
        "block-cursor-background": "#f5e0dc",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#313244 20%",

        "input-cursor-background": "#cdd6f4",
        "input-cursor-foreground": "#11111b",
        "input-selection-background": "#f5c2e7 30%",

        "border": "#45475a",
        "border-blurred": "#313244",

        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#f5c2e7",
        "scrollbar-background": "#181825",
        "scrollbar-corner-color": "#181825",

        "footer-foreground": "#bac2de",
        "footer-background": "#11111b",
        "footer-key-foreground": "#f9e2af",
        "footer-key-background": "#313244",

        "text-muted": "#6c7086",
        "text-disabled": "#45475a",
    },
)

# Same roles on a light cream background
ADVISOR_LIGHT = Theme(
    name=LIGHT_THEME_NAME,
    primary="#d20f72",
    secondary="#8839ef",
    accent="#df8e1d",
    foreground="#4c4f69",
    background="#eff1f5",
    success="#40a02b",
    warning="#fe640b",
    error="#d20f39",
    surface="#e6e9ef",
    panel="#dce0e8",
    dark=False,
    variables={
        "block-cursor-foreground": "#eff1f5",
        "block-cursor-background": "#d20f72",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#ccd0da 40%",

        "input-cursor-background": "#4c4f69",
        "input-cursor-foreground": "#eff1f5",
        "input-selection-background": "#d20f72 25%",

        "border": "#acb0be",
        "border-blurred": "#ccd0da",

        "scrollbar": "#ccd0da",
        "scrollbar-hover": "#acb0be",
        "scrollbar-active": "#d20f72",
        "scrollbar-background": "#e6e9ef",
        "scrollbar-corner-color": "#e6e9ef",

        "footer-foreground": "#5c5f77",
        "footer-background": "#dce0e8",
        "footer-key-foreground": "#d20f72",
        "footer-key-background": "#ccd0da",

        "text-muted": "#8c8fa1",
        "text-disabled": "#acb0be",
    },
)

THEMES = {DARK: ADVISOR_DARK, LIGHT: ADVISOR_LIGHT}


def theme_name(preference: str) -> str:
    """Textual theme name for a persisted "dark"/"light" preference."""
    return THEMES.get(preference, ADVISOR_DARK).name
