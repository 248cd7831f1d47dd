"""Chat core for gemchat.

Module structure (Parnas principle - each module hides a design decision):
- models.py: Message/Conversation representation and id generation
- formatter.py: Reply cleanup rules
- typewriter.py: Word-by-word reveal pacing
- model_selector.py: Startup model choice
- store.py: Conversation persistence
- controller.py: Turn protocol and session state
"""

from .controller import ChatSessionController, SessionEvent, SessionEventKind, SessionState
from .formatter import format_response
from .model_selector import ModelSelector, rank_models
from .models import Conversation, ConversationCollection, IdGenerator, Message, Sender, derive_title
from .store import ConversationStore
from .typewriter import TypewriterRevealer

__all__ = [
    "ChatSessionController",
    "Conversation",
    "ConversationCollection",
    "ConversationStore",
    "IdGenerator",
    "Message",
    "ModelSelector",
    "Sender",
    "SessionEvent",
    "SessionEventKind",
    "SessionState",
    "TypewriterRevealer",
    "derive_title",
    "format_response",
    "rank_models",
]
