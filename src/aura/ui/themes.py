"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Near-black surfaces with indigo and pink accents
AURA_MIDNIGHT = Theme(
    name="aura-midnight",
    primary="#6366f1",      # Indigo - main accent
    secondary="#a855f7",    # Purple - secondary accent
    accent="#ec4899",       # Pink - highlights
    foreground="#e5e7eb",   # Gray 200 - text
    background="#0a0a0a",   # Page background
    success="#10b981",      # Emerald
    warning="#f59e0b",      # Amber
    error="#ef4444",        # Red
    surface="#1a1a1a",      # Cards
    panel="#0d0d0d",        # Tab bodies
    dark=True,
    variables={
        "block-cursor-foreground": "#0a0a0a",
        "block-cursor-background": "#818cf8",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#6366f1 15%",
        "input-cursor-background": "#e5e7eb",
        "input-selection-background": "#6366f1 35%",
        "border": "#2a2a2a",
        "border-blurred": "#1f1f1f",
        "scrollbar": "#2a2a2a",
        "scrollbar-hover": "#6366f1",
        "scrollbar-active": "#818cf8",
        "scrollbar-background": "#0d0d0d",
        "footer-key-foreground": "#818cf8",
        "footer-description-foreground": "#9ca3af",
    },
)
