"""Main Textual TUI application.

Orchestrates the tabs and routes user actions through the Assistant.
Each action runs in its own exclusive worker group and disables its
trigger while the request is in flight.
"""

import asyncio
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Markdown,
    Select,
    Static,
    TabbedContent,
    TabPane,
    TextArea,
)

from ..activity import Activity
from ..assistant import VIDEO_ERROR_MESSAGE, Assistant, ResearchMode
from ..audio import write_wav
from ..capabilities import AspectRatio, Attachment, CapabilityError, GeoLocation
from ..conversation import ChatSession
from .config import HISTORY_TABLE_LIMIT, RECENT_ACTIVITY_COUNT, LogLevel
from .styles import APP_CSS
from .themes import AURA_MIDNIGHT
from .widgets import (
    ActivityChart,
    ActivityTable,
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    RecentMemory,
    SourcesList,
)

TABS = ("dashboard", "chat", "research", "voice", "video", "history")

WELCOME_TEXT = (
    "[b]Welcome back.[/b] Aura is connected to Gemini.\n"
    "[dim]F1-F6 switch tabs | Ctrl+J sends a chat message | Ctrl+D shows the log[/dim]"
)


def parse_location(raw: str) -> GeoLocation | None:
    """Parse ``"lat, lng"`` into a GeoLocation; blank input means none.

    Raises:
        ValueError: If the text is not two numbers in range
    """
    if not raw.strip():
        return None
    parts = [part.strip() for part in raw.split(",")]
    if len(parts) != 2:
        raise ValueError("Location must be 'latitude, longitude'")
    return GeoLocation(latitude=float(parts[0]), longitude=float(parts[1]))


class AuraApp(App):
    """Textual TUI for the Aura assistant."""

    CSS = APP_CSS
    TITLE = "Aura"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("f1", "show_tab('dashboard')", "Dashboard"),
        Binding("f2", "show_tab('chat')", "Chat"),
        Binding("f3", "show_tab('research')", "Research"),
        Binding("f4", "show_tab('voice')", "Voice"),
        Binding("f5", "show_tab('video')", "Video"),
        Binding("f6", "show_tab('history')", "History"),
        Binding("ctrl+k", "clear_chat", "Clear Chat"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(self, assistant: Assistant, log_level: str | None = None) -> None:
        super().__init__()
        self._assistant = assistant
        self._log_level = log_level
        self._session: ChatSession | None = None
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with TabbedContent(initial="dashboard"):
            with TabPane("Dashboard", id="dashboard"):
                yield Static(WELCOME_TEXT, id="welcome")
                yield RecentMemory(id="recent-memory", classes="card")
                with Horizontal(classes="form-row"):
                    yield Input(placeholder="Ask a quick question...", id="quick-input")
                    yield Button("Ask", id="quick-btn", variant="primary")
                yield Static("", id="quick-answer", classes="card")

            with TabPane("Chat", id="chat"):
                yield ChatHistoryWidget(id="chat-history")
                with Horizontal(id="chat-options"):
                    yield Checkbox("Thinking mode", id="thinking-toggle")
                    yield Input(placeholder="Image path to attach (optional)", id="chat-image")
                yield ChatInputBar(id="chat-input-bar")

            with TabPane("Research", id="research"):
                with Horizontal(classes="form-row"):
                    yield Input(placeholder="What do you want to research?", id="research-input")
                    yield Select(
                        [("Web search", ResearchMode.SEARCH.value), ("Places", ResearchMode.PLACES.value)],
                        value=ResearchMode.SEARCH.value,
                        allow_blank=False,
                        id="research-mode",
                    )
                    yield Button("Research", id="research-btn", variant="primary")
                yield Input(placeholder="Near 'latitude, longitude' (places only)", id="research-location")
                yield Markdown("", id="research-answer", classes="card")
                yield SourcesList(id="research-sources", classes="card")

            with TabPane("Voice", id="voice"):
                yield TextArea(id="voice-text")
                with Horizontal(classes="form-row"):
                    yield Input(value="aura-speech.wav", placeholder="Output WAV file", id="voice-output")
                    yield Button("Speak", id="speak-btn", variant="primary")
                    yield Button("Start Session", id="voice-session-btn")
                yield Static("", id="voice-status", classes="status-line")

            with TabPane("Video", id="video"):
                yield Input(placeholder="Path to source image", id="video-image")
                with Horizontal(classes="form-row"):
                    yield Input(placeholder="Describe the motion (optional)", id="video-prompt")
                    yield Select(
                        [("Landscape 16:9", AspectRatio.LANDSCAPE.value), ("Portrait 9:16", AspectRatio.PORTRAIT.value)],
                        value=AspectRatio.LANDSCAPE.value,
                        allow_blank=False,
                        id="video-aspect",
                    )
                    yield Button("Generate", id="video-btn", variant="primary", disabled=True)
                yield Static("", id="video-status", classes="status-line")

            with TabPane("History", id="history"):
                with Vertical():
                    yield ActivityChart(id="activity-chart", classes="card")
                    yield ActivityTable(id="activity-table")

        yield DebugPanel(id="debug-panel")
        yield Footer()

    def on_mount(self) -> None:
        self.register_theme(AURA_MIDNIGHT)
        self.theme = "aura-midnight"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        activity_log = self._assistant.activity_log
        self._assistant.client.set_debug_callback(self._route_debug)
        activity_log.set_debug_callback(self._route_debug)
        self._unsubscribe = activity_log.subscribe(self._on_activity)

        chat = self.query_one("#chat-history", ChatHistoryWidget)
        self._session = self._assistant.new_chat_session(on_message=chat.add_message)
        self._session.set_debug_callback(self._route_debug)

        self._refresh_activity_views()
        self.sub_title = f"{len(activity_log)} activities | {activity_log.storage.backend_type}"

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _route_debug(self, level: str, component: str, message: str) -> None:
        """Route debug messages from library components to the log panel."""
        self.query_one("#debug-panel", DebugPanel).add_entry(
            component, message, LogLevel.from_string(level)
        )

    def _on_activity(self, activity: Activity) -> None:
        self._refresh_activity_views()
        self.sub_title = (
            f"{len(self._assistant.activity_log)} activities | "
            f"{self._assistant.activity_log.storage.backend_type}"
        )

    def _refresh_activity_views(self) -> None:
        activity_log = self._assistant.activity_log
        self.query_one("#recent-memory", RecentMemory).show_activities(
            activity_log.recent(RECENT_ACTIVITY_COUNT)
        )
        self.query_one("#activity-chart", ActivityChart).show_counts(activity_log.count_by_type())
        self.query_one("#activity-table", ActivityTable).show_activities(
            activity_log.recent(HISTORY_TABLE_LIMIT)
        )

    def _set_status(self, widget_id: str, text: str, state: str | None = None) -> None:
        status = self.query_one(widget_id, Static)
        status.update(text)
        status.set_class(state == "error", "-error")
        status.set_class(state == "success", "-success")

    # ---- Chat ----

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        if self._session is None:
            return
        if self._session.is_busy:
            self.notify("Aura is still answering", severity="warning", timeout=2)
            return

        image_input = self.query_one("#chat-image", Input)
        attachment = None
        if image_input.value.strip():
            try:
                attachment = Attachment.from_path(Path(image_input.value.strip()).expanduser())
            except OSError as e:
                self.notify(f"Cannot read image: {e}", severity="error", timeout=4)
                return
        if not event.value and attachment is None:
            return

        image_input.value = ""
        thinking = self.query_one("#thinking-toggle", Checkbox).value
        self._send_chat(event.value, attachment, thinking)

    @work(exclusive=True, group="chat")
    async def _send_chat(self, text: str, attachment: Attachment | None, thinking: bool) -> None:
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        input_bar.set_busy(True)
        try:
            await self._session.send(text, image=attachment, use_thinking=thinking)
            if self._session.last_error is not None:
                self.notify(str(self._session.last_error)[:80], severity="error", timeout=5)
        finally:
            input_bar.set_busy(False)
            input_bar.focus_input()

    def action_clear_chat(self) -> None:
        if self._session is None or self._session.is_busy:
            return
        self.query_one("#chat-history", ChatHistoryWidget).clear_history()
        self._session.clear()
        self.notify("Chat cleared", timeout=2)

    # ---- Buttons ----

    def on_button_pressed(self, event: Button.Pressed) -> None:
        handlers = {
            "quick-btn": self._start_quick_answer,
            "research-btn": self._start_research,
            "speak-btn": self._start_speech,
            "voice-session-btn": self._start_voice_session,
            "video-btn": self._start_video,
        }
        handler = handlers.get(event.button.id or "")
        if handler is not None:
            handler()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "quick-input":
            self._start_quick_answer()
        elif event.input.id in ("research-input", "research-location"):
            self._start_research()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "video-image":
            self.query_one("#video-btn", Button).disabled = not self._video_source_ready()

    def _video_source_ready(self) -> bool:
        raw = self.query_one("#video-image", Input).value.strip()
        return bool(raw) and Path(raw).expanduser().is_file()

    # ---- Dashboard quick answer ----

    def _start_quick_answer(self) -> None:
        query = self.query_one("#quick-input", Input).value.strip()
        if query:
            self._quick_answer(query)

    @work(exclusive=True, group="quick")
    async def _quick_answer(self, query: str) -> None:
        button = self.query_one("#quick-btn", Button)
        answer = self.query_one("#quick-answer", Static)
        button.disabled = True
        answer.update("[dim]Thinking...[/dim]")
        try:
            text = await self._assistant.ask(query)
            answer.update(text or "[dim]No answer[/dim]")
            self.query_one("#quick-input", Input).value = ""
        except CapabilityError as e:
            answer.update(f"[red]{e}[/red]")
        finally:
            button.disabled = False

    # ---- Research ----

    def _start_research(self) -> None:
        query = self.query_one("#research-input", Input).value.strip()
        if not query:
            return
        mode = ResearchMode(self.query_one("#research-mode", Select).value)
        try:
            location = parse_location(self.query_one("#research-location", Input).value)
        except ValueError as e:
            self.notify(str(e), severity="error", timeout=4)
            return
        self._research(query, mode, location)

    @work(exclusive=True, group="research")
    async def _research(self, query: str, mode: ResearchMode, location: GeoLocation | None) -> None:
        button = self.query_one("#research-btn", Button)
        answer = self.query_one("#research-answer", Markdown)
        sources = self.query_one("#research-sources", SourcesList)
        button.disabled = True
        sources.clear_references()
        await answer.update("_Researching..._")
        try:
            result = await self._assistant.research(query, mode, location)
            await answer.update(result.text or "_No answer text returned._")
            sources.show_references(result.references)
        except CapabilityError as e:
            await answer.update(f"**Research failed:** {e}")
        finally:
            button.disabled = False

    # ---- Voice ----

    def _start_speech(self) -> None:
        text = self.query_one("#voice-text", TextArea).text.strip()
        output = self.query_one("#voice-output", Input).value.strip()
        if not text:
            self.notify("Enter some text to speak", severity="warning", timeout=2)
            return
        self._speak(text, Path(output or "aura-speech.wav").expanduser())

    @work(exclusive=True, group="voice")
    async def _speak(self, text: str, output: Path) -> None:
        button = self.query_one("#speak-btn", Button)
        button.disabled = True
        self._set_status("#voice-status", "Synthesizing speech...")
        try:
            audio = await self._assistant.speak(text)
            if not audio:
                self._set_status("#voice-status", "The service returned no audio.", "error")
                return
            path = await asyncio.to_thread(write_wav, output, audio)
            self._set_status("#voice-status", f"Saved {len(audio):,} bytes of audio to {path}", "success")
        except (CapabilityError, OSError) as e:
            self._set_status("#voice-status", f"Speech failed: {e}", "error")
        finally:
            button.disabled = False

    @work(exclusive=True, group="voice-session")
    async def _start_voice_session(self) -> None:
        await self._assistant.start_voice_session()
        self._set_status("#voice-status", "Voice link session initialized.", "success")

    # ---- Video ----

    def _start_video(self) -> None:
        if not self._video_source_ready():
            return
        image_path = Path(self.query_one("#video-image", Input).value.strip()).expanduser()
        prompt = self.query_one("#video-prompt", Input).value.strip()
        aspect = AspectRatio(self.query_one("#video-aspect", Select).value)
        self._animate(image_path, prompt, aspect)

    @work(exclusive=True, group="video")
    async def _animate(self, image_path: Path, prompt: str, aspect: AspectRatio) -> None:
        button = self.query_one("#video-btn", Button)
        button.disabled = True
        self._set_status("#video-status", "Generating video, this can take a few minutes...")
        try:
            attachment = await asyncio.to_thread(Attachment.from_path, image_path)
            video = await self._assistant.animate(attachment, prompt, aspect)
            self._set_status("#video-status", f"Video saved to {video.path}\n{video.uri}", "success")
            self.notify("Video ready", timeout=3)
        except CapabilityError as e:
            self._set_status("#video-status", str(e) or VIDEO_ERROR_MESSAGE, "error")
        except OSError as e:
            self._set_status("#video-status", f"Cannot read image: {e}", "error")
        finally:
            button.disabled = not self._video_source_ready()

    # ---- Navigation ----

    def action_show_tab(self, tab: str) -> None:
        if tab in TABS:
            self.query_one(TabbedContent).active = tab

    def action_toggle_debug(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_textual_tui(assistant: Assistant, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        assistant: Assistant wired to a capability client and a loaded activity log
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = AuraApp(assistant, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
