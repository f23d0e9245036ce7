"""Textual CSS for the Aura tabs. Colors come from the active theme."""

APP_CSS = """
/* layout */
Screen {
    layout: vertical;
    background: $background;
}

TabbedContent {
    height: 1fr;
}

TabPane {
    padding: 1 2;
    background: $panel;
}

/* cards and forms */
.card {
    height: auto;
    background: $surface;
    border: round $border;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    margin-bottom: 1;
}

.form-row {
    height: auto;
    margin-bottom: 1;

    & Input {
        width: 1fr;
    }

    & Button {
        margin-left: 1;
    }

    & Select {
        width: 24;
        margin-left: 1;
    }
}

.status-line {
    height: auto;
    color: $text-muted;
    padding: 0 1;

    &.-error {
        color: $error;
    }

    &.-success {
        color: $success;
    }
}

/* dashboard */
#welcome {
    height: auto;
    padding: 1 2;
    margin-bottom: 1;
    background: $primary 10%;
    border: round $primary 60%;
    color: $foreground;
}

#recent-memory {
    min-height: 5;
}

#quick-answer {
    min-height: 3;
}

/* chat history panel */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary-lighten-1;
    }
}

#chat-options {
    height: auto;
    margin-top: 1;

    & Checkbox {
        width: auto;
    }

    & Input {
        width: 1fr;
        margin-left: 1;
    }
}

/* chat input */
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

    &:focus {
        background: transparent;
    }
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
        border: tall $success-lighten-1;
    }
}

/* chat messages */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 1 2;
    background: transparent;
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
    border-left: tall $accent;
    background: $accent 8%;

    & .message-header {
        color: $accent;
        text-style: bold;
    }
}

.message-header {
    height: auto;
}

.message-content {
    height: auto;
    color: $foreground;
}

.message-media,
.message-sources {
    height: auto;
    color: $text-muted;
}

/* research */
#research-answer {
    min-height: 5;
}

#research-sources {
    min-height: 3;
}

/* voice and video */
#voice-text {
    height: 8;
    margin-bottom: 1;
}

#video-btn:disabled {
    opacity: 60%;
}

/* history */
#activity-chart {
    min-height: 7;
}

#activity-table {
    height: 1fr;
}

/* trace panel */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    scrollbar-gutter: stable;
}

Header {
    background: $panel;
    color: $foreground;
}

HeaderTitle {
    color: $primary;
    text-style: bold;
}

Footer {
    background: $panel;
}

/* markdown and datatable */
Markdown {
    margin: 0;
    padding: 0;
}

MarkdownFence {
    background: $panel;
    border: round $border;
    margin: 1 0;
    padding: 1;
}

DataTable {
    background: $surface;
    border: tall $border;
}

DataTable > .datatable--header {
    background: $panel;
    color: $primary;
    text-style: bold;
}

DataTable > .datatable--cursor {
    background: $primary 30%;
}
"""
