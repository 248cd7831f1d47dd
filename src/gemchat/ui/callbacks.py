"""Bridges from the chat core to the widgets.

Hides the details of how the TUI receives updates:
- SessionViewBinding subscribes to ChatSessionController events
- DebugPanelHandler routes gemchat log records into the log panel
"""

import logging
import threading
from typing import TYPE_CHECKING, Any

from ..chat import ChatSessionController, SessionEvent, SessionEventKind, SessionState

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import ChatHistoryWidget, ChatInputBar, ConversationSidebar, DebugPanel


def _call_thread_safe(app: "App | None", func: Any, *args: Any, **kwargs: Any) -> None:
    """Call a function in a thread-safe manner for UI updates."""
    if app is not None and app._thread_id != threading.get_ident():
        app.call_from_thread(func, *args, **kwargs)
    else:
        func(*args, **kwargs)


class SessionViewBinding:
    """Renders controller events into the chat widgets.

    The controller owns the message list; this class only reads it.
    """

    def __init__(
        self,
        controller: ChatSessionController,
        history: "ChatHistoryWidget",
        input_bar: "ChatInputBar",
        sidebar: "ConversationSidebar",
        app: "App | None" = None,
    ) -> None:
        self.controller = controller
        self.history = history
        self.input_bar = input_bar
        self.sidebar = sidebar
        self.app = app
        self._unsubscribe = None

    def attach(self) -> None:
        self._unsubscribe = self.controller.subscribe(self)
        self.render_all()

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __call__(self, event: SessionEvent) -> None:
        _call_thread_safe(self.app, self._handle, event)

    def _handle(self, event: SessionEvent) -> None:
        kind = event.kind
        if kind is SessionEventKind.MESSAGE_ADDED:
            self.history.add_message(event.message)
        elif kind is SessionEventKind.MESSAGE_UPDATED:
            self.history.update_message(event.message)
        elif kind is SessionEventKind.STATE_CHANGED:
            self._render_state()
        elif kind is SessionEventKind.VIEW_RESET:
            self.history.show_messages(self.controller.messages)
            self._render_sidebar()
        elif kind is SessionEventKind.CONVERSATIONS_CHANGED:
            self._render_sidebar()
        elif kind is SessionEventKind.MODEL_CHANGED:
            self._render_title()

    def _render_state(self) -> None:
        state = self.controller.state
        self.history.set_thinking(state is SessionState.AWAITING_RESPONSE)
        self.input_bar.set_busy(state is not SessionState.IDLE)

    def _render_sidebar(self) -> None:
        self.sidebar.show_conversations(
            self.controller.conversations,
            self.controller.active_conversation_id,
        )
        self._render_title()

    def _render_title(self) -> None:
        if self.app is None:
            return
        model = self.controller.model or "no model selected"
        active = self.controller.active_conversation_id
        conversation = next((c for c in self.controller.conversations if c.id == active), None)
        title = conversation.title if conversation else "New Chat"
        self.app.sub_title = f"{model} | {title}"

    def render_all(self) -> None:
        self.history.show_messages(self.controller.messages)
        self._render_sidebar()
        self._render_state()


class DebugPanelHandler(logging.Handler):
    """logging.Handler writing records to a DebugPanel."""

    def __init__(self, panel: "DebugPanel", app: "App | None" = None, level: int = logging.NOTSET):
        super().__init__(level)
        self.panel = panel
        self.app = app

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            component = record.name.rsplit(".", 1)[-1]
            _call_thread_safe(self.app, self.panel.add_entry, component, message, record.levelno)
        except Exception:
            self.handleError(record)
