"""Terminal UI module for gemchat.

Provides a Textual-based TUI over ChatSessionController.

Module structure (Parnas principle - each module hides a design decision):
- widgets.py: Custom widgets (input box, message list, sidebar, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- callbacks.py: Core integration (how the TUI receives updates)
- app.py: Application orchestration (user interaction flow)
"""

from .app import GemchatApp, run_chat_tui
from .callbacks import DebugPanelHandler, SessionViewBinding
from .widgets import ChatHistoryWidget, ChatInputBar, ConversationSidebar, DebugPanel

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "ConversationSidebar",
    "DebugPanel",
    "DebugPanelHandler",
    "GemchatApp",
    "SessionViewBinding",
    "run_chat_tui",
]
