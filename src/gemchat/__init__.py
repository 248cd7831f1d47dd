"""
Gemchat: a terminal chat client for Gemini with persistent conversations.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .chat import (
    ChatSessionController,
    Conversation,
    ConversationStore,
    Message,
    ModelSelector,
    Sender,
    SessionState,
    TypewriterRevealer,
    format_response,
)

__all__ = [
    "ChatSessionController",
    "Conversation",
    "ConversationStore",
    "Message",
    "ModelSelector",
    "Sender",
    "SessionState",
    "TypewriterRevealer",
    "format_response",
]
