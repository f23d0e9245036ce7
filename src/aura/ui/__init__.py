"""Terminal UI module for aura.

Provides a Textual-based TUI over the Assistant.

Module structure (Parnas principle - each module hides a design decision):
- config.py: Constants (log levels, colors, list sizes)
- widgets.py: Custom widgets (chat rendering, log panel, activity summaries)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- app.py: Application orchestration (user interaction flow)
"""

from .app import AuraApp, parse_location, run_textual_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel

__all__ = [
    "AuraApp",
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "LogLevel",
    "parse_location",
    "run_textual_tui",
]
