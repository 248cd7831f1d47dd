"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Warm amber palette on a dark stone background
AMBER_NIGHT = Theme(
    name="amber-night",
    primary="#f59e0b",      # Amber - main accent
    secondary="#ea580c",    # Orange - secondary accent
    accent="#fcd34d",       # Light amber - highlights
    foreground="#f5f5f4",   # Stone 100 text
    background="#0c0a09",   # Stone 950
    success="#84cc16",
    warning="#fb923c",
    error="#f87171",
    surface="#1c1917",      # Stone 900
    panel="#292524",        # Stone 800
    dark=True,
    variables={
        "border": "#44403c",
        "border-blurred": "#292524",
        "scrollbar": "#292524",
        "scrollbar-hover": "#44403c",
        "scrollbar-active": "#f59e0b",
        "footer-key-foreground": "#fcd34d",
        "text-muted": "#a8a29e",
        "input-selection-background": "#f59e0b 30%",
    },
)
