"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
"""

APP_CSS = """
Screen {
    layout: horizontal;
    background: $background;
}

/* Sidebar with saved conversations */
#sidebar {
    width: 32;
    height: 100%;
    background: $surface;
    border: round $border;
    border-title-color: $primary;
    border-title-style: bold;

    &.-hidden {
        display: none;
    }

    &:focus-within {
        border: round $primary;
    }
}

#sidebar ListItem {
    padding: 0 1;
}

#sidebar ListItem.-active-conversation {
    background: $primary 25%;
    text-style: bold;
}

#main-panel {
    width: 1fr;
    height: 100%;
}

/* Chat history */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    padding: 0 1;
    scrollbar-gutter: stable;
}

.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
}

.user-message {
    border-left: thick $secondary;
    margin-left: 8;
}

.assistant-message {
    border-left: thick $primary;
    margin-right: 8;
}

.message-header {
    color: $text-muted;
    text-style: italic;
}

.message-content {
    height: auto;
}

#thinking {
    height: auto;
    color: $accent;
    padding: 1 1 0 1;
    display: none;

    &.-visible {
        display: block;
    }
}

/* Empty session */
#empty-state {
    height: auto;
    align: center top;
    padding: 2 4;
}

#empty-state .welcome-title {
    text-style: bold;
    color: $primary;
    width: 100%;
    text-align: center;
}

#empty-state .welcome-subtitle {
    color: $text-muted;
    width: 100%;
    text-align: center;
    margin-bottom: 1;
}

#empty-state Button {
    width: 100%;
    margin: 0 0 1 0;
}

/* Input bar */
#chat-input-bar {
    height: auto;
    max-height: 12;
    padding: 0 0;
}

#chat-input {
    width: 1fr;
    height: auto;
    min-height: 3;
    max-height: 10;
    border: round $border;

    &:focus {
        border: round $primary;
    }
}

#send-btn {
    width: 10;
    margin: 1 0 0 1;
}

#input-hint {
    color: $text-muted;
    width: 100%;
    text-align: center;
}

/* Log panel */
#debug-panel {
    height: 10;
    border: round $border;
    border-title-color: $warning;
}
"""
