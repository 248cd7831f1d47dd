"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Enter/Shift+Enter handling in the input box
- Chat message rendering and in-place updates during a reveal
- Conversation list rendering
- Log rendering and level filtering
"""

import logging
from datetime import datetime

from rich.text import Text
from textual import events
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message as TextualMessage
from textual.widgets import Button, Label, ListItem, ListView, RichLog, Static, TextArea

from ..chat import Conversation, Message, Sender
from .config import (
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MESSAGE_TIMESTAMP_FORMAT,
    SIDEBAR_TITLE,
    SUGGESTED_PROMPTS,
    THINKING_TEXT,
    WELCOME_SUBTITLE,
    WELCOME_TITLE,
)


class ChatTextArea(TextArea):
    """Multi-line input where Enter submits and Shift+Enter breaks the line.

    Most terminals report Shift+Enter as plain Enter, so Ctrl+J also
    inserts a line break.
    """

    NEWLINE_KEYS = ("shift+enter", "ctrl+j")

    class Submitted(TextualMessage):
        """Posted when Enter is pressed without a modifier."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    async def _on_key(self, event: events.Key) -> None:
        # prevent_default keeps TextArea's own key handler from running
        if event.key == "enter":
            event.stop()
            event.prevent_default()
            self.post_message(self.Submitted(self.text))
        elif event.key in self.NEWLINE_KEYS:
            event.stop()
            event.prevent_default()
            self.insert("\n")


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def compose(self):
        text_area = ChatTextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="warning")

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", ChatTextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self.post_message(self.Submitted(self.value))

    def on_chat_text_area_submitted(self, event: ChatTextArea.Submitted) -> None:
        event.stop()
        self.post_message(self.Submitted(event.value))

    @property
    def value(self) -> str:
        return self.query_one("#chat-input", ChatTextArea).text

    def set_value(self, value: str) -> None:
        text_area = self.query_one("#chat-input", ChatTextArea)
        text_area.text = value
        text_area.move_cursor(text_area.document.end)
        text_area.focus()

    def clear(self) -> None:
        self.query_one("#chat-input", ChatTextArea).text = ""

    def set_busy(self, busy: bool) -> None:
        """Disable input while a turn is running."""
        self.query_one("#chat-input", ChatTextArea).disabled = busy
        self.query_one("#send-btn", Button).disabled = busy
        if not busy:
            self.focus_input()

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", ChatTextArea).focus()


class MessageView(Vertical):
    """One rendered chat message; clicking copies its text."""

    def __init__(self, message: Message, **kwargs) -> None:
        role_class = "user-message" if message.sender is Sender.USER else "assistant-message"
        super().__init__(classes=f"chat-message {role_class}", **kwargs)
        self.message = message

    def compose(self):
        if self.message.sender is Sender.USER:
            prefix, icon = "You", ">"
        else:
            prefix, icon = "Assistant", "<"
        created = datetime.fromtimestamp(self.message.id / 1000)
        yield Static(f"{icon} {prefix} [{created.strftime(MESSAGE_TIMESTAMP_FORMAT)}]",
                     classes="message-header", markup=False)
        yield Static(Text(self.message.text), classes="message-content")

    def set_message(self, message: Message) -> None:
        self.message = message
        self.query_one(".message-content", Static).update(Text(message.text))

    def on_click(self, event: events.Click) -> None:
        """Copy message content to clipboard when clicked."""
        event.stop()
        self.app.copy_to_clipboard(self.message.text)
        self.app.notify("Copied to clipboard", timeout=2)


class SuggestionPicked(TextualMessage):
    """A suggested prompt was chosen from the empty-session screen."""

    def __init__(self, prompt: str) -> None:
        super().__init__()
        self.prompt = prompt


class EmptyState(Vertical):
    """Welcome text and suggested prompts for a fresh session."""

    def compose(self):
        yield Static(WELCOME_TITLE, classes="welcome-title")
        yield Static(WELCOME_SUBTITLE, classes="welcome-subtitle")
        for index, prompt in enumerate(SUGGESTED_PROMPTS):
            yield Button(prompt, id=f"suggestion-{index}")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(SuggestionPicked(str(event.button.label)))


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history keyed by message id."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "New conversation"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: dict[int, MessageView] = {}

    def compose(self):
        yield EmptyState(id="empty-state")
        yield Static(THINKING_TEXT, id="thinking")

    def _refresh_chrome(self) -> None:
        count = len(self._views)
        self.query_one("#empty-state", EmptyState).display = count == 0
        self.border_subtitle = f"{count} messages" if count else "New conversation"

    def add_message(self, message: Message) -> None:
        """Append a message above the thinking indicator."""
        view = MessageView(message)
        self._views[message.id] = view
        self.mount(view, before=self.query_one("#thinking", Static))
        self._refresh_chrome()
        self.scroll_end(animate=False)

    def update_message(self, message: Message) -> None:
        """Replace the text of an already rendered message."""
        view = self._views.get(message.id)
        if view is None:
            self.add_message(message)
            return
        view.set_message(message)
        self.scroll_end(animate=False)

    def show_messages(self, messages: tuple[Message, ...]) -> None:
        """Replace the whole history."""
        self.clear_history()
        for message in messages:
            self.add_message(message)

    def clear_history(self) -> None:
        for view in self._views.values():
            view.remove()
        self._views.clear()
        self._refresh_chrome()

    def set_thinking(self, thinking: bool) -> None:
        self.query_one("#thinking", Static).set_class(thinking, "-visible")
        if thinking:
            self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        """Get the last assistant response."""
        for view in reversed(list(self._views.values())):
            if view.message.sender is Sender.ASSISTANT:
                return view.message.text
        return None


class ConversationItem(ListItem):
    """Sidebar entry for one stored conversation."""

    def __init__(self, conversation: Conversation, active: bool = False) -> None:
        super().__init__(
            Label(conversation.title, markup=False),
            classes="-active-conversation" if active else "",
        )
        self.conversation_id = conversation.id


class ConversationSidebar(ListView):
    """List of stored conversations, newest first."""

    BORDER_TITLE = SIDEBAR_TITLE

    BINDINGS = [
        Binding("delete", "delete_conversation", "Delete", show=True),
    ]

    class DeleteRequested(TextualMessage):
        def __init__(self, conversation_id: int) -> None:
            super().__init__()
            self.conversation_id = conversation_id

    def show_conversations(
        self,
        conversations: tuple[Conversation, ...],
        active_id: int | None,
    ) -> None:
        self.clear()
        self.extend(ConversationItem(c, active=c.id == active_id) for c in conversations)
        self.border_subtitle = str(len(conversations))

    def action_delete_conversation(self) -> None:
        item = self.highlighted_child
        if isinstance(item, ConversationItem):
            self.post_message(self.DeleteRequested(item.conversation_id))


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped records from gemchat loggers.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        logging.DEBUG: "dim white",
        logging.INFO: "cyan",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "controller": "green",
        "store": "bright_green",
        "typewriter": "bright_yellow",
        "model_selector": "magenta",
        "sqlite": "blue",
        "app": "cyan",
    }

    def __init__(self, *args, log_level: int = logging.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {logging.getLevelName(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_entry(self, component: str, message: str, level: int = logging.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "red")
        comp_color = self.COMPONENT_COLORS.get(component, "white")
        line = Text()
        line.append(f"{timestamp} ", style="dim")
        line.append(f"{logging.getLevelName(level):<7}", style=level_color)
        line.append(f"[{component}] ", style=comp_color)
        line.append(message)
        self.write(line)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
