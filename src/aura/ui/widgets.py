"""Widgets used by the Aura tabs.

The chat tab owns the input bar and the conversation view. The dashboard
and history tabs render the activity log, and the trace panel sits under
every tab.
"""

from datetime import datetime

from rich.table import Table
from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, DataTable, Markdown, RichLog, Static, TextArea

from ..activity import Activity, ActivityType
from ..capabilities import GroundingReference, Message
from .config import (
    ACTIVITY_COLORS,
    ACTIVITY_TIMESTAMP_FORMAT,
    CHART_BAR_WIDTH,
    COMPONENT_COLORS,
    LOG_TIMESTAMP_FORMAT,
    LogLevel,
)


def _format_activity_time(activity: Activity) -> str:
    return datetime.fromtimestamp(activity.timestamp / 1000).strftime(ACTIVITY_TIMESTAMP_FORMAT)


class ClickableMessage(Vertical):
    """A chat message container that copies its content when clicked."""

    def __init__(self, content: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = content

    def on_click(self, event: Click) -> None:
        event.stop()
        if not self._content:
            return
        self.app.copy_to_clipboard(self._content)
        self.app.notify("Copied to clipboard", timeout=2)


class ChatInputBar(Horizontal):
    """Multi-line prompt with a Send button.

    Ctrl+J sends (terminals do not report modifiers on Enter). Up at the
    start of the prompt and Down at its end walk through earlier prompts.
    """

    class Submitted(TextualMessage):
        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._sent: list[str] = []
        self._recall: int | None = None

    @property
    def _prompt(self) -> TextArea:
        return self.query_one("#chat-input", TextArea)

    def compose(self):
        prompt = TextArea(id="chat-input", show_line_numbers=False)
        prompt.cursor_blink = False
        yield prompt
        yield Button("Send", id="send-btn", variant="success").with_tooltip("Send (Ctrl+J)")

    def on_mount(self) -> None:
        self._prompt.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "send-btn":
            return
        event.stop()
        self._send()

    def on_key(self, event) -> None:
        prompt = self._prompt
        row, col = prompt.cursor_location
        lines = prompt.text.split("\n")
        if event.key == "ctrl+j":
            self._send()
        elif event.key == "up" and (row, col) == (0, 0):
            self._recall_step(-1)
        elif event.key == "down" and (row, col) == (len(lines) - 1, len(lines[-1])):
            self._recall_step(1)
        else:
            return
        event.prevent_default()
        event.stop()

    def _recall_step(self, step: int) -> None:
        if not self._sent:
            return
        last = len(self._sent) - 1
        if self._recall is None:
            if step > 0:
                return
            self._recall = last
        else:
            self._recall += step
        if self._recall > last:
            self._recall = None
            self._prompt.text = ""
            return
        self._recall = max(self._recall, 0)
        self._prompt.text = self._sent[self._recall]

    def _send(self) -> None:
        # Blank text still goes out; the chat tab may have an image queued.
        prompt = self._prompt
        value = prompt.text.strip()
        if value and self._sent[-1:] != [value]:
            self._sent.append(value)
        self._recall = None
        prompt.text = ""
        self.post_message(self.Submitted(value))

    def set_busy(self, busy: bool) -> None:
        """Disable the Send button while a reply is pending."""
        button = self.query_one("#send-btn", Button)
        button.disabled = busy
        button.label = "..." if busy else "Send"

    def focus_input(self) -> None:
        self._prompt.focus()


class ChatHistoryWidget(VerticalScroll):
    """Scrollable conversation view."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "No messages yet"
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._message_count = 0

    def add_message(self, message: Message) -> None:
        """Render one conversation message at the bottom."""
        self._message_count += 1
        self.border_subtitle = f"{self._message_count} messages"
        self.mount(self._render_message(message))
        self.scroll_end(animate=False)

    def clear_history(self) -> None:
        self._message_count = 0
        self.remove_children()
        self.border_subtitle = "No messages yet"

    def _render_message(self, message: Message) -> ClickableMessage:
        is_user = message.role == "user"
        header = f"{'>' if is_user else '<'} {'You' if is_user else 'Aura'} [{datetime.now():%H:%M:%S}]"
        container = ClickableMessage(
            content=message.content,
            classes=f"chat-message {'user-message' if is_user else 'assistant-message'}",
        )
        container.compose_add_child(Static(header, classes="message-header"))

        if message.media_url:
            container.compose_add_child(Static("[image attached]", classes="message-media", markup=False))
        if message.content:
            if is_user:
                container.compose_add_child(Static(Text(message.content), classes="message-content"))
            else:
                container.compose_add_child(Markdown(message.content, classes="message-content"))
        if message.grounding_urls:
            container.compose_add_child(
                Static(_format_references(message.grounding_urls), classes="message-sources")
            )
        return container


def _format_references(references: list[GroundingReference]) -> Text:
    text = Text()
    for i, ref in enumerate(references, 1):
        if i > 1:
            text.append("\n")
        text.append(f"{i}. ", style="dim")
        text.append(ref.title or ref.uri, style=f"link {ref.uri}")
        text.append(f" ({ref.kind})", style="dim")
    return text


class SourcesList(Static):
    """Grounding sources returned with a research answer."""

    BORDER_TITLE = "Sources"

    def show_references(self, references: list[GroundingReference]) -> None:
        self.border_subtitle = f"{len(references)} found"
        if not references:
            self.update(Text("No grounding sources returned", style="dim"))
            return
        self.update(_format_references(references))

    def clear_references(self) -> None:
        self.border_subtitle = ""
        self.update("")


class RecentMemory(Static):
    """Dashboard card listing the newest activities."""

    BORDER_TITLE = "Recent Memory"

    def show_activities(self, activities: list[Activity]) -> None:
        if not activities:
            self.update(Text("No recent context captured.", style="dim italic"))
            return

        text = Text()
        for i, activity in enumerate(activities):
            if i:
                text.append("\n")
            text.append("● ", style=ACTIVITY_COLORS.get(activity.type.value, "white"))
            text.append(activity.description)
            text.append(f"  {_format_activity_time(activity)}", style="dim")
        self.update(text)


class ActivityChart(Static):
    """Horizontal bar chart of activity counts per type."""

    BORDER_TITLE = "Activity by type"

    def show_counts(self, counts: dict[ActivityType, int]) -> None:
        peak = max(counts.values(), default=0)
        total = sum(counts.values())
        self.border_subtitle = f"{total} total"

        table = Table.grid(padding=(0, 1))
        table.add_column(width=9)
        table.add_column()
        table.add_column(justify="right")
        for activity_type, count in counts.items():
            width = round(count / peak * CHART_BAR_WIDTH) if peak else 0
            color = ACTIVITY_COLORS.get(activity_type.value, "white")
            table.add_row(
                activity_type.value.capitalize(),
                Text("█" * width or "·", style=color),
                str(count),
            )
        self.update(table)


class ActivityTable(DataTable):
    """Newest-first table of recorded activities."""

    def on_mount(self) -> None:
        self.cursor_type = "row"
        self.zebra_stripes = True

    def show_activities(self, activities: list[Activity]) -> None:
        if not self.columns:
            self.add_columns("When", "Type", "Description")
        self.clear()
        for activity in activities:
            self.add_row(
                _format_activity_time(activity),
                Text(activity.type.value, style=ACTIVITY_COLORS.get(activity.type.value, "white")),
                activity.description,
                key=activity.id,
            )


LEVEL_STYLES = {
    LogLevel.DEBUG: "dim white",
    LogLevel.INFO: "cyan",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
}


class DebugPanel(RichLog):
    """Trace of client, poller, activity-log and UI events.

    Starts hidden; ``--log-level`` opens it at launch and Ctrl+D toggles it.
    Entries below ``log_level`` are dropped.
    """

    BORDER_TITLE = "Log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(*args, markup=True, highlight=False, auto_scroll=True, wrap=False, **kwargs)
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._refresh_subtitle()

    def _refresh_subtitle(self) -> None:
        self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}" if self.display else "Hidden"

    def on_mount(self) -> None:
        self.hide()

    def add_entry(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Write one timestamped line tagged with its component and level."""
        if level < self._log_level:
            return
        line = Text()
        line.append(datetime.now().strftime(LOG_TIMESTAMP_FORMAT), style="dim")
        line.append(f" {LogLevel.name(level):<7} ", style=LEVEL_STYLES.get(level, "white"))
        line.append(f"[{component}]", style=COMPONENT_COLORS.get(component, "white"))
        line.append(f" {message}")
        self.write(line)

    def info(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.INFO)

    def show(self) -> None:
        self.display = True
        self._refresh_subtitle()

    def hide(self) -> None:
        self.display = False
        self._refresh_subtitle()

    def toggle(self) -> bool:
        if self.display:
            self.hide()
        else:
            self.show()
        return self.display
