"""Textual application for gemchat.

Wires the chat core to the widgets and handles user interaction.
"""

import asyncio
import logging

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, ListView, Static

from ..chat import ChatSessionController, ModelSelector
from ..exceptions import StorageError
from ..storage import KeyValueStorage
from .callbacks import DebugPanelHandler, SessionViewBinding
from .config import INPUT_HINT, parse_log_level
from .styles import APP_CSS
from .themes import AMBER_NIGHT
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    ConversationItem,
    ConversationSidebar,
    DebugPanel,
    SuggestionPicked,
)

logger = logging.getLogger(__name__)


class GemchatApp(App):
    """Textual TUI for chatting with Gemini."""

    CSS = APP_CSS
    TITLE = "Gemchat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_chat", "New Chat"),
        Binding("ctrl+b", "toggle_sidebar", "Sidebar"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log"),
    ]

    def __init__(
        self,
        controller: ChatSessionController,
        selector: ModelSelector,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._controller = controller
        self._selector = selector
        self._log_level = log_level
        self._binding: SessionViewBinding | None = None
        self._log_handler: DebugPanelHandler | None = None

    @property
    def controller(self) -> ChatSessionController:
        return self._controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ConversationSidebar(id="sidebar")
        with Vertical(id="main-panel"):
            yield ChatHistoryWidget(id="chat-history")
            yield ChatInputBar(id="chat-input-bar")
            yield Static(INPUT_HINT, id="input-hint")
            yield DebugPanel(id="debug-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Install the theme, the log bridge and the session binding, then boot."""
        self.register_theme(AMBER_NIGHT)
        self.theme = "amber-night"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        self._log_handler = DebugPanelHandler(log_panel, app=self)
        logging.getLogger("gemchat").addHandler(self._log_handler)
        if self._log_level is not None:
            log_panel.log_level = parse_log_level(self._log_level)
            log_panel.show()

        self._binding = SessionViewBinding(
            self._controller,
            history=self.query_one("#chat-history", ChatHistoryWidget),
            input_bar=self.query_one("#chat-input-bar", ChatInputBar),
            sidebar=self.query_one("#sidebar", ConversationSidebar),
            app=self,
        )
        self._binding.attach()

        self._boot()

    def on_unmount(self) -> None:
        """Detach from the controller and logging."""
        if self._binding is not None:
            self._binding.detach()
        if self._log_handler is not None:
            logging.getLogger("gemchat").removeHandler(self._log_handler)
            self._log_handler = None

    @work(group="boot", exit_on_error=False)
    async def _boot(self) -> None:
        """Load saved conversations, then pick the model that enables sending."""
        try:
            await self._controller.start()
        except StorageError as e:
            logger.error("Could not read saved conversations: %s", e)
            self.notify(
                "Saved conversations could not be read; new chats will not be saved",
                severity="error",
                timeout=8,
            )
        else:
            logger.info("Loaded %d conversation(s)", len(self._controller.conversations))

        model = await self._selector.select()
        self._controller.set_model(model)
        if model is None:
            self.notify("No Gemini model available; sending is disabled", severity="error", timeout=8)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Start a turn for the submitted text."""
        if not self._controller.can_submit(event.value):
            return
        self.query_one("#chat-input-bar", ChatInputBar).clear()
        self._run_turn(event.value)

    @work(group="turn", exit_on_error=False)
    async def _run_turn(self, text: str) -> None:
        await self._controller.submit(text)

    def on_suggestion_picked(self, event: SuggestionPicked) -> None:
        self.query_one("#chat-input-bar", ChatInputBar).set_value(event.prompt)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if isinstance(item, ConversationItem):
            if not self._controller.select_conversation(item.conversation_id):
                self.notify("Wait for the current reply to finish", severity="warning", timeout=2)

    def on_conversation_sidebar_delete_requested(
        self, event: ConversationSidebar.DeleteRequested
    ) -> None:
        self._delete_conversation(event.conversation_id)

    @work(group="delete", exit_on_error=False)
    async def _delete_conversation(self, conversation_id: int) -> None:
        if await self._controller.delete_conversation(conversation_id):
            self.notify("Conversation deleted", timeout=2)
        else:
            self.notify("Cannot delete while a reply is in progress", severity="warning", timeout=2)

    def action_new_chat(self) -> None:
        """Start a fresh session."""
        if self._controller.new_chat():
            self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_toggle_sidebar(self) -> None:
        self.query_one("#sidebar", ConversationSidebar).toggle_class("-hidden")

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy the newest assistant message."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_chat_tui(
    controller: ChatSessionController,
    selector: ModelSelector,
    storage: KeyValueStorage,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        controller: Chat session controller (its store must use ``storage``)
        selector: Model selector run once at startup
        storage: Storage backend, connected here and closed on exit
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    logging.getLogger("gemchat").setLevel(
        parse_log_level(log_level) if log_level else logging.INFO
    )
    await storage.connect()
    app = GemchatApp(controller=controller, selector=selector, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await storage.disconnect()
