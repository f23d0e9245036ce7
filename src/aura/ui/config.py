"""UI configuration constants.

Centralizes log levels, colors and list sizes used by the TUI widgets.
"""


class LogLevel:
    """Numeric thresholds for the debug panel.

    Components report levels as strings ("debug", "info", "warning",
    "error"); the panel shows entries at or above its threshold.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "warn": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Display name for a numeric level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Parse a level name; unknown names fall back to DEBUG."""
        return cls._from_string.get(level_str.strip().lower(), cls.DEBUG)


# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"

# Dashboard "Recent Memory" entries
RECENT_ACTIVITY_COUNT = 3

# Activity history table
ACTIVITY_TIMESTAMP_FORMAT = "%b %d %H:%M"
HISTORY_TABLE_LIMIT = 200

# Width of the widest bar in the activity chart
CHART_BAR_WIDTH = 30

# Colors per activity type (chat, research, voice, video, task)
ACTIVITY_COLORS = {
    "chat": "#6366f1",
    "research": "#10b981",
    "voice": "#f59e0b",
    "video": "#ec4899",
    "task": "#8b5cf6",
}

# Colors per log component
COMPONENT_COLORS = {
    "TUI": "cyan",
    "Client": "magenta",
    "Poller": "bright_blue",
    "Activity": "bright_green",
    "Chat": "bright_cyan",
}
